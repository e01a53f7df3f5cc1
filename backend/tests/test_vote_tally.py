"""Tests for the vote tally state machine."""

import itertools

import pytest

from stackit.services.vote_tally import VoteDirection, VoteTally, weight


class TestVoteTallyClicks:
    """Single-click transitions."""

    def test_fresh_up_vote_adds_one(self):
        tally = VoteTally(votes=15)
        assert tally.click("up") == 1
        assert tally.votes == 16
        assert tally.user_vote is VoteDirection.UP

    def test_fresh_down_vote_subtracts_one(self):
        tally = VoteTally(votes=15)
        assert tally.click("down") == -1
        assert tally.votes == 14
        assert tally.user_vote is VoteDirection.DOWN

    def test_clicking_up_twice_retracts(self):
        tally = VoteTally(votes=15)
        tally.click("up")
        tally.click("up")
        assert tally.votes == 15
        assert tally.user_vote is VoteDirection.NONE

    def test_retracting_down_adds_one(self):
        tally = VoteTally(votes=10, user_vote="down")
        assert tally.click("down") == 1
        assert tally.votes == 11
        assert tally.user_vote_value is None

    def test_flip_up_to_down_moves_two(self):
        tally = VoteTally(votes=23, user_vote=VoteDirection.UP)
        assert tally.click("down") == -2
        assert tally.votes == 21

    def test_flip_down_to_up_moves_two(self):
        tally = VoteTally(votes=5, user_vote="down")
        assert tally.click(VoteDirection.UP) == 2
        assert tally.votes == 7

    def test_up_then_down_is_net_minus_one(self):
        tally = VoteTally(votes=8)
        tally.click("up")
        tally.click("down")
        assert tally.votes == 7
        assert tally.user_vote_value == "down"

    def test_rejects_unknown_direction(self):
        tally = VoteTally(votes=0)
        with pytest.raises(ValueError, match="vote_type must be"):
            tally.click("sideways")

    def test_rejects_none_click(self):
        tally = VoteTally(votes=0)
        with pytest.raises(ValueError, match="vote_type must be"):
            tally.click(VoteDirection.NONE)


class TestVoteTallyInvariant:
    """The count depends only on the base count and the final direction."""

    @pytest.mark.parametrize("length", [1, 2, 3, 4])
    def test_every_click_sequence(self, length):
        base = 15
        for clicks in itertools.product(["up", "down"], repeat=length):
            tally = VoteTally(votes=base)
            for click in clicks:
                tally.click(click)
            assert tally.votes == base + weight(tally.user_vote), clicks
            assert tally.base_count == base

    def test_base_count_with_initial_vote(self):
        tally = VoteTally(votes=24, user_vote="up")
        assert tally.base_count == 23
        tally.click("down")
        tally.click("down")
        assert tally.votes == 23


def test_coerce_accepts_none_as_neutral():
    assert VoteDirection.coerce(None) is VoteDirection.NONE
