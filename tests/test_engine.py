"""Smoke tests for the deal."""
import random
from collections import Counter

from hokm.deal import OPENING_ROUNDS, PENDING_ROUNDS, deal_hokm, next_seat
from hokm.deck import make_deck_52, shuffle


def test_deal_sizes_and_balance():
    deal = deal_hokm(rng=random.Random(42))
    for seat in range(4):
        assert len(deal.hands[seat]) == OPENING_ROUNDS
        assert len(deal.pending[seat]) == PENDING_ROUNDS
    assert deal.residual == []
    all_cards = list(deal.residual)
    for h in deal.hands:
        all_cards.extend(h)
    for reserve in deal.pending.values():
        all_cards.extend(reserve)
    assert len(all_cards) == 52
    assert len(set(all_cards)) == 52  # 52 distinct cards
    assert 0 <= deal.hakim < 4


def test_deal_is_round_robin_reserve_first():
    expected_rng = random.Random(5)
    expected = shuffle(make_deck_52(), expected_rng)
    expected_hakim = expected_rng.randrange(4)

    deal = deal_hokm(rng=random.Random(5))
    for seat in range(4):
        # Rounds 0..7 feed the reserve, rounds 8..12 the opening hand
        assert deal.pending[seat] == expected[seat:32:4]
        assert deal.hands[seat] == expected[32 + seat:52:4]
    assert deal.hakim == expected_hakim


def test_deal_does_not_mutate_given_deck():
    deck = make_deck_52()
    before = list(deck)
    deal_hokm(deck=deck, rng=random.Random(1))
    assert deck == before


def test_hakim_drawn_from_every_seat():
    rng = random.Random(77)
    counts = Counter(deal_hokm(rng=rng).hakim for _ in range(400))
    assert set(counts) == {0, 1, 2, 3}
    for seat in range(4):
        assert 60 <= counts[seat] <= 140


def test_next_seat_wraps():
    assert [next_seat(s) for s in range(4)] == [1, 2, 3, 0]
