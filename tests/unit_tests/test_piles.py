import pytest

from klondike.piles import (
    InvariantError,
    StockPile,
    TableauPile,
    WastePile,
    check_invariants,
    make_foundations,
    make_tableau,
)


def test_stock_draw_pops_in_order_and_caps_at_available(cards):
    stock = StockPile()
    stock.refill(cards("AH", "2H", "3H", "4H"))
    drawn = stock.draw(3)
    assert [c.id for c in drawn] == ["4-hearts", "3-hearts", "2-hearts"]
    assert [c.id for c in stock.draw(3)] == ["A-hearts"]
    assert stock.draw(3) == []


def test_refill_turns_cards_face_down_and_waste_face_up(cards):
    stock, waste = StockPile(), WastePile()
    stock.refill(cards("AH", "2H"))
    assert all(not c.face_up for c in stock)
    waste.receive(stock.draw(2))
    assert all(c.face_up for c in waste)
    assert waste.top().id == "A-hearts"


def test_tableau_run_helpers(cards):
    pile = TableauPile(cards("KC", "9D", face_up=False) + cards("8S", "7H"))
    assert pile.first_face_up_index() == 2
    assert pile.face_down_count() == 2
    assert [c.id for c in pile.face_up_run()] == ["8-spades", "7-hearts"]
    assert pile.run_card(1) is None
    assert pile.run_card(3).id == "7-hearts"
    with pytest.raises(InvariantError):
        pile.take_from(0)
    moved = pile.take_from(2)
    assert len(moved) == 2 and len(pile) == 2
    assert pile.flip_top() is True
    assert pile.flip_top() is False


def test_iterating_a_pile_is_a_snapshot(cards):
    pile = TableauPile(cards("5H", "4S"))
    for _ in pile:
        pile.pop()
    assert len(pile) == 0


def test_check_invariants_catches_duplicates_and_bad_foundations(cards):
    foundations = make_foundations()
    tableau = make_tableau()
    stock, waste = StockPile(), WastePile()
    tableau[0].extend(cards("5H"))
    waste.receive(cards("5H"))
    with pytest.raises(InvariantError):
        check_invariants(stock, waste, foundations, tableau, expected_total=None)

    waste.clear()
    foundations["clubs"].push(cards("2C")[0])
    with pytest.raises(InvariantError):
        check_invariants(stock, waste, foundations, tableau, expected_total=None)


def test_check_invariants_counts_cards(cards):
    tableau = make_tableau()
    tableau[0].extend(cards("5H"))
    with pytest.raises(InvariantError):
        check_invariants(StockPile(), WastePile(), make_foundations(), tableau)
    check_invariants(StockPile(), WastePile(), make_foundations(), tableau, expected_total=1)
