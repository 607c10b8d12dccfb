import random

import pytest

from klondike.cards import SUITS, Card, build_deck, deal_order, parse_card, shuffle


def test_build_deck_is_suit_major_and_face_down():
    deck = build_deck()
    assert len(deck) == 52
    assert len({c.id for c in deck}) == 52
    assert all(not c.face_up for c in deck)
    assert [c.suit for c in deck[:13]] == ["hearts"] * 13
    assert [c.rank for c in deck[:13]] == list(range(1, 14))
    assert deck[-1].id == "K-spades"


def test_card_color_and_labels():
    c = Card("diamonds", 10, True)
    assert c.is_red and c.color() == "red"
    assert c.value == "10"
    assert c.label == "10♦"
    assert c.symbol == "♦"
    assert Card("clubs", 1).color() == "black"


def test_card_rejects_bad_values():
    with pytest.raises(ValueError):
        Card("stars", 3)
    with pytest.raises(ValueError):
        Card("hearts", 14)


def test_seeded_shuffle_is_reproducible_and_a_permutation():
    a = shuffle(build_deck(), random.Random(123))
    b = shuffle(build_deck(), random.Random(123))
    assert [c.id for c in a] == [c.id for c in b]
    assert sorted(c.id for c in a) == sorted(c.id for c in build_deck())
    assert [c.id for c in a] != [c.id for c in build_deck()]


def test_shuffle_without_rng_keeps_every_card():
    deck = shuffle(build_deck())
    assert len({c.id for c in deck}) == 52


def test_deal_order_places_28_cards_one_face_up_per_pile():
    order = deal_order()
    assert len(order) == 28
    for pile in range(7):
        placements = [up for p, up in order if p == pile]
        assert len(placements) == pile + 1
        assert placements[-1] is True
        assert not any(placements[:-1])


@pytest.mark.parametrize(
    "text,suit,rank",
    [("10H", "hearts", 10), ("Qs", "spades", 12), ("A♠", "spades", 1), ("kd", "diamonds", 13)],
)
def test_parse_card(text, suit, rank):
    c = parse_card(text)
    assert (c.suit, c.rank, c.face_up) == (suit, rank, True)


def test_parse_card_rejects_garbage():
    for bad in ("", "1H", "QX"):
        with pytest.raises(ValueError):
            parse_card(bad)


def test_suits_order():
    assert SUITS == ("hearts", "diamonds", "clubs", "spades")
