"""Tests for bot policies."""
import pytest

from hokm.agents import GreedyBot, RandomBot
from hokm.deck import Card, Suit, parse_cards
from hokm.play import Play


def _trick(*tokens):
    return [Play(seat=i, card=Card.parse(t)) for i, t in enumerate(tokens)]


def test_greedy_follows_lead_with_highest():
    hand = parse_cards(["2_c", "9_h", "k_h", "a_s"])
    assert GreedyBot().choose_card(hand, _trick("5_h")) == Card.parse("k_h")


def test_greedy_plays_first_card_without_lead_suit():
    hand = parse_cards(["2_c", "9_d", "a_s"])
    assert GreedyBot().choose_card(hand, _trick("5_h", "a_h")) == Card.parse("2_c")


def test_greedy_leads_with_first_card():
    hand = parse_cards(["q_d", "a_s"])
    assert GreedyBot().choose_card(hand, []) == Card.parse("q_d")


def test_greedy_never_trumps_in_on_purpose():
    # Holding trump but no lead suit card still just plays the first card
    hand = parse_cards(["3_c", "a_s"])
    assert GreedyBot().choose_card(hand, _trick("k_h")) == Card.parse("3_c")


def test_greedy_choose_trump_longest_suit():
    bot = GreedyBot()
    hand = parse_cards(["2_c", "3_c", "4_c", "a_h", "k_h", "5_s"])
    assert bot.choose_trump(hand) == Suit.CLUBS
    # Equal length: stronger suit wins
    assert bot.choose_trump(parse_cards(["2_c", "3_c", "a_h", "k_h"])) == Suit.HEARTS
    # Full tie: canonical suit order
    assert bot.choose_trump(parse_cards(["2_c", "2_d"])) == Suit.CLUBS


def test_random_bot_stays_in_hand_and_is_seeded():
    hand = parse_cards(["2_c", "9_h", "k_h", "a_s"])
    a = RandomBot(seed=123)
    b = RandomBot(seed=123)
    picks_a = [a.choose_card(hand, []) for _ in range(20)]
    picks_b = [b.choose_card(hand, []) for _ in range(20)]
    assert picks_a == picks_b
    assert all(c in hand for c in picks_a)


def test_bots_refuse_empty_hand():
    with pytest.raises(ValueError):
        GreedyBot().choose_card([], [])
    with pytest.raises(ValueError):
        RandomBot(seed=0).choose_card([], [])
