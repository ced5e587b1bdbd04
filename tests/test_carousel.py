from glowup.carousel import Carousel


def test_next_and_previous_wrap_around() -> None:
    carousel = Carousel(["a", "b", "c"])

    assert carousel.current == "a"
    assert carousel.previous() == "c"
    assert carousel.next() == "a"
    assert carousel.next() == "b"
    assert carousel.next() == "c"
    assert carousel.next() == "a"


def test_go_to_is_cyclic() -> None:
    carousel = Carousel(["a", "b", "c"])

    assert carousel.go_to(4) == "b"
    assert carousel.go_to(-1) == "c"
    assert carousel.index == 2


def test_load_rewinds_to_first_item() -> None:
    carousel = Carousel(["a", "b"])
    carousel.next()

    carousel.load(["x", "y", "z"])

    assert carousel.index == 0
    assert carousel.total == 3
    assert carousel.current == "x"


def test_empty_carousel_stays_put() -> None:
    carousel: Carousel[str] = Carousel()

    assert carousel.current is None
    assert carousel.next() is None
    assert carousel.previous() is None
    assert carousel.go_to(3) is None
    assert carousel.index == 0
