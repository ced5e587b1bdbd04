"""Template-based social content calendar.

The calendar is derived locally from the profile, without a model call.
Template choice is a pure function of ``(seed, week, post)``.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Tuple

from .errors import IncompleteProfile
from .schemas import CalendarPost, CalendarWeek, ContentCalendar, Profile

WEEKS_PER_CALENDAR = 4
LAUNCH_WEEK_POSTS = 4
REGULAR_WEEK_POSTS = 3

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

WEEK_THEMES: Dict[str, Tuple[str, ...]] = {
    "Professional": ("Problem Awareness", "Solution Showcase", "Industry Insights", "Company Milestones"),
    "Friendly": ("Community Building", "Behind the Scenes", "Customer Stories", "Team Culture"),
    "Innovative": ("Future Vision", "Tech Deep Dives", "Trend Analysis", "Innovation Stories"),
    "Luxury": ("Premium Positioning", "Exclusive Insights", "Quality Focus", "Brand Heritage"),
    "Casual": ("Daily Life", "Fun Facts", "User Stories", "Relatable Content"),
}
DEFAULT_THEME_TONE = "Professional"


@dataclass(frozen=True)
class PostTemplate:
    title: str
    content: str
    hashtags: Tuple[str, ...]
    engagement: str
    timing: str


PLATFORMS = ("LinkedIn", "Instagram")

POST_TEMPLATES: Dict[str, Tuple[PostTemplate, ...]] = {
    "LinkedIn": (
        PostTemplate(
            title="How {name} is solving {problem}",
            content=(
                "🚀 Excited to share how we're tackling one of the biggest challenges in our industry. "
                "{problem} affects millions, and we're building the solution. #Innovation #Startup #ProblemSolving"
            ),
            hashtags=("#Innovation", "#Startup", "#ProblemSolving", "#Tech", "#Future"),
            engagement="High",
            timing="9:00 AM",
        ),
        PostTemplate(
            title="Behind the scenes at {name}",
            content=(
                "💡 Ever wondered what goes into building a game-changing solution? Here's a peek into our "
                "development process and the team making it happen. #BehindTheScenes #TeamWork #Innovation"
            ),
            hashtags=("#BehindTheScenes", "#TeamWork", "#Innovation", "#StartupLife", "#Building"),
            engagement="Medium",
            timing="2:00 PM",
        ),
        PostTemplate(
            title="Industry insights: The future of our space",
            content=(
                "🔮 We're not just building a product, we're shaping the future. Here's what we see coming in "
                "the next 5 years and how {name} fits into that vision. #FutureOfTech #IndustryInsights #Innovation"
            ),
            hashtags=("#FutureOfTech", "#IndustryInsights", "#Innovation", "#Trends", "#Vision"),
            engagement="High",
            timing="11:00 AM",
        ),
        PostTemplate(
            title="Customer success story",
            content=(
                "🎉 Nothing makes us happier than seeing our solution make a real difference. Here's how we "
                "helped one customer overcome {problem} and achieve their goals. #CustomerSuccess #Impact #Results"
            ),
            hashtags=("#CustomerSuccess", "#Impact", "#Results", "#Testimonial", "#Success"),
            engagement="High",
            timing="3:00 PM",
        ),
    ),
    "Instagram": (
        PostTemplate(
            title="Visual story: Our journey so far",
            content=(
                "📸 From idea to reality - here's the visual story of how {name} came to life. "
                "Swipe to see our evolution! #StartupJourney #VisualStory #Innovation"
            ),
            hashtags=("#StartupJourney", "#VisualStory", "#Innovation", "#BehindTheScenes", "#Story"),
            engagement="High",
            timing="12:00 PM",
        ),
        PostTemplate(
            title="Team spotlight",
            content=(
                "👥 Meet the amazing people behind {name}! Every great solution starts with a great team. "
                "#TeamSpotlight #StartupTeam #Innovation"
            ),
            hashtags=("#TeamSpotlight", "#StartupTeam", "#Innovation", "#People", "#Culture"),
            engagement="Medium",
            timing="6:00 PM",
        ),
        PostTemplate(
            title="Product showcase",
            content=(
                "✨ Here's what we've been building! {name} in action, solving {problem} one step at a time. "
                "#ProductShowcase #Innovation #Solution"
            ),
            hashtags=("#ProductShowcase", "#Innovation", "#Solution", "#Tech", "#Product"),
            engagement="High",
            timing="10:00 AM",
        ),
    ),
}


def next_month(today: date) -> Tuple[str, int]:
    """Return the name and year of the month after *today*."""

    if today.month == 12:
        return MONTH_NAMES[0], today.year + 1
    return MONTH_NAMES[today.month], today.year


def week_theme(week: int, brand_tone: str) -> str:
    themes = WEEK_THEMES.get(brand_tone.strip().title(), WEEK_THEMES[DEFAULT_THEME_TONE])
    return themes[week - 1]


def day_of_week(week: int, post_number: int) -> str:
    return DAYS[((week - 1) * 7 + post_number - 1) % 7]


def pick_template(seed: int, week: int, post_number: int) -> Tuple[str, PostTemplate]:
    """Choose a platform and template deterministically."""

    rng = random.Random(f"{seed}:{week}:{post_number}")
    platform = rng.choice(PLATFORMS)
    return platform, rng.choice(POST_TEMPLATES[platform])


def _build_post(profile: Profile, seed: int, week: int, post_number: int) -> CalendarPost:
    platform, template = pick_template(seed, week, post_number)
    values = {"name": profile.startup_name.strip(), "problem": profile.problem.strip()}
    return CalendarPost(
        id=f"week{week}-post{post_number}",
        week=week,
        post_number=post_number,
        platform=platform,
        title=template.title.format(**values),
        content=template.content.format(**values),
        hashtags=list(template.hashtags),
        engagement=template.engagement,
        timing=template.timing,
        day=day_of_week(week, post_number),
    )


def build_calendar(profile: Profile, *, today: date, seed: int = 0) -> ContentCalendar:
    """Build the next month's content calendar for *profile*."""

    if not (profile.startup_name.strip() and profile.brand_tone.strip() and profile.problem.strip()):
        raise IncompleteProfile(
            "Please complete your startup profile with startup name, brand tone, and problem statement first"
        )

    month, year = next_month(today)
    weeks: List[CalendarWeek] = []
    for week in range(1, WEEKS_PER_CALENDAR + 1):
        post_count = LAUNCH_WEEK_POSTS if week == 1 else REGULAR_WEEK_POSTS
        weeks.append(
            CalendarWeek(
                week_number=week,
                theme=week_theme(week, profile.brand_tone),
                posts=[_build_post(profile, seed, week, post) for post in range(1, post_count + 1)],
            )
        )

    return ContentCalendar(
        month=month,
        year=year,
        startup_name=profile.startup_name,
        brand_tone=profile.brand_tone,
        problem=profile.problem,
        solution=profile.solution,
        weeks=weeks,
    )
