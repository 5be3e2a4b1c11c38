import pytest

from dac.config import DACConfig, ProposalRules
from dac.engine import GovernanceEngine
from dac.errors import (AlreadyExecuted, DACError, DuplicateVote, InsufficientTreasuryFunds,
                        InvalidAmount, InvalidRequest, NoVotingPower, NotFound,
                        ProposalRejected, TransferError, VotingClosed,
                        VotingStillOpen)
from dac.tests import CREATE_HEIGHT, funded


def _passed(engine, amount=500):
    funded(engine, donor1=1_000, donor2=500)
    pid = engine.propose("beneficiary1", amount, "Help children", 100, CREATE_HEIGHT)
    engine.vote("donor1", pid, True, 150)
    return pid


# --- donate ---

def test_zero_donation_is_rejected(engine):
    with pytest.raises(InvalidAmount):
        engine.donate("donor1", 0)
    assert engine.get_contributor("donor1") is None
    assert engine.balance == 0
    assert engine.events() == ()


def test_configured_minimum_donation():
    cfg = DACConfig()
    cfg.donations.min_donation = 50
    eng = GovernanceEngine(config=cfg)
    with pytest.raises(InvalidAmount) as ei:
        eng.donate("donor1", 49)
    assert ei.value.details["min_donation"] == 50
    eng.donate("donor1", 50)
    assert eng.balance == 50


# --- propose ---

def test_propose_more_than_balance(engine):
    funded(engine, donor1=1_000)
    with pytest.raises(InsufficientTreasuryFunds) as ei:
        engine.propose("beneficiary1", 1_500, "Help children", 100, CREATE_HEIGHT)
    assert ei.value.err_code == 103
    assert engine.get_proposal(1) is None


@pytest.mark.parametrize(
    "kwargs, exc",
    [
        ({"beneficiary": ""}, InvalidRequest),
        ({"amount": 0}, InvalidAmount),
        ({"amount": -3}, InvalidAmount),
        ({"description": "x" * 501}, InvalidRequest),
        ({"duration_blocks": -1}, InvalidRequest),
        ({"current_height": -1}, InvalidRequest),
    ],
)
def test_propose_shape_validation(engine, kwargs, exc):
    funded(engine, donor1=1_000)
    args = {
        "beneficiary": "b",
        "amount": 10,
        "description": "ok",
        "duration_blocks": 10,
        "current_height": CREATE_HEIGHT,
    }
    args.update(kwargs)
    with pytest.raises(exc):
        engine.propose(**args)
    assert engine.state.proposals.last_id == 0


def test_duration_bounds_from_config():
    cfg = DACConfig(proposals=ProposalRules(min_duration_blocks=10, max_duration_blocks=20))
    eng = funded(GovernanceEngine(config=cfg), donor1=100)
    with pytest.raises(InvalidRequest):
        eng.propose("b", 10, "short", 9, CREATE_HEIGHT)
    with pytest.raises(InvalidRequest):
        eng.propose("b", 10, "long", 21, CREATE_HEIGHT)
    assert eng.propose("b", 10, "ok", 20, CREATE_HEIGHT) == 1


# --- vote ---

def test_vote_unknown_proposal(engine):
    funded(engine, donor1=1_000)
    with pytest.raises(NotFound) as ei:
        engine.vote("donor1", 9, True, 150)
    assert ei.value.err_code == 101


def test_vote_after_window(engine):
    pid = _passed(engine)
    with pytest.raises(VotingClosed):
        engine.vote("donor2", pid, False, 201)
    assert not engine.has_voted(pid, "donor2")


def test_vote_on_executed_proposal_is_closed(engine):
    pid = _passed(engine)
    engine.execute(pid, 201)
    with pytest.raises(VotingClosed):
        engine.vote("donor2", pid, False, 150)


def test_vote_without_contribution(engine):
    funded(engine, donor1=1_000)
    pid = engine.propose("b", 100, "x", 100, CREATE_HEIGHT)
    with pytest.raises(NoVotingPower) as ei:
        engine.vote("stranger", pid, True, 150)
    assert ei.value.err_code == 102
    assert not engine.has_voted(pid, "stranger")


def test_double_voting(engine):
    funded(engine, donor1=1_000)
    pid = engine.propose("beneficiary1", 500, "Help children", 100, CREATE_HEIGHT)
    engine.vote("donor1", pid, True, 150)
    with pytest.raises(DuplicateVote) as ei:
        engine.vote("donor1", pid, False, 150)
    assert ei.value.err_code == 106
    p = engine.get_proposal(pid)
    assert (p.votes_for, p.votes_against) == (1_000, 0)


def test_vote_check_order_closed_before_power(engine):
    funded(engine, donor1=1_000)
    pid = engine.propose("b", 100, "x", 100, CREATE_HEIGHT)
    # Late and powerless: the window check wins.
    with pytest.raises(VotingClosed):
        engine.vote("stranger", pid, True, 500)


# --- execute ---

def test_execute_unknown(engine):
    with pytest.raises(NotFound):
        engine.execute(3, 500)


@pytest.mark.parametrize("height", [100, 150, 200])
def test_execute_before_window_closes(engine, height):
    pid = _passed(engine)
    with pytest.raises(VotingStillOpen) as ei:
        engine.execute(pid, height)
    assert ei.value.err_code == 104
    assert engine.balance == 1_500


def test_execute_tie_is_rejected(engine):
    funded(engine, donor1=500, donor2=500)
    pid = engine.propose("b", 100, "tie", 100, CREATE_HEIGHT)
    engine.vote("donor1", pid, True, 150)
    engine.vote("donor2", pid, False, 150)
    with pytest.raises(ProposalRejected) as ei:
        engine.execute(pid, 201)
    assert ei.value.details["votes_for"] == ei.value.details["votes_against"] == 500
    assert engine.balance == 1_000


def test_execute_without_any_votes_is_rejected(engine):
    funded(engine, donor1=500)
    pid = engine.propose("b", 100, "quiet", 100, CREATE_HEIGHT)
    with pytest.raises(ProposalRejected):
        engine.execute(pid, 201)


def test_execute_twice(engine):
    pid = _passed(engine)
    engine.execute(pid, 201)
    with pytest.raises(AlreadyExecuted) as ei:
        engine.execute(pid, 202)
    assert ei.value.err_code == 105
    assert engine.balance == 1_000


def test_already_executed_wins_over_still_open_check(engine):
    funded(engine, donor1=100)
    pid = engine.propose("b", 10, "x", 0, CREATE_HEIGHT)
    engine.vote("donor1", pid, True, CREATE_HEIGHT)
    engine.execute(pid, CREATE_HEIGHT + 1)
    with pytest.raises(AlreadyExecuted):
        engine.execute(pid, CREATE_HEIGHT)


def test_transfer_failure_rolls_back(engine, payments):
    pid = _passed(engine)
    payments.fail_next = True
    with pytest.raises(TransferError):
        engine.execute(pid, 201)

    p = engine.get_proposal(pid)
    assert p.is_executed is False
    assert p.is_active is True
    assert engine.balance == 1_500
    engine.state.assert_consistent()

    # The proposal remains executable once the backend recovers.
    engine.execute(pid, 202)
    assert payments.received("beneficiary1") == 500
    assert engine.balance == 1_000


class _FlakyBackend:
    def __init__(self):
        self.calls = 0

    def transfer(self, sender, to, amount):
        self.calls += 1
        raise ConnectionError("payout node unreachable")


def test_backend_crash_rolls_back_and_surfaces_as_transfer_error():
    backend = _FlakyBackend()
    engine = GovernanceEngine(payments=backend)
    pid = _passed(engine)

    with pytest.raises(TransferError) as ei:
        engine.execute(pid, 201)
    assert isinstance(ei.value.__cause__, ConnectionError)
    assert ei.value.details == {"to": "beneficiary1", "amount": 500}
    assert backend.calls == 1

    assert engine.balance == 1_500
    assert engine.get_proposal(pid).is_executed is False
    engine.state.assert_consistent()


@pytest.mark.parametrize("voter", ["", ["donor1"], None])
def test_malformed_voter_is_invalid_request(engine, voter):
    pid = _passed(engine)
    with pytest.raises(InvalidRequest):
        engine.vote(voter, pid, True, 150)
    assert engine.get_proposal(pid).voter_count == 1


def test_engine_usable_after_every_failure(engine):
    funded(engine, donor1=1_000)
    for call in (
        lambda: engine.donate("donor1", 0),
        lambda: engine.propose("b", 5_000, "x", 1, CREATE_HEIGHT),
        lambda: engine.vote("donor1", 1, True, 150),
        lambda: engine.execute(1, 300),
    ):
        with pytest.raises(DACError):
            call()
    pid = engine.propose("b", 100, "after failures", 1, CREATE_HEIGHT)
    engine.vote("donor1", pid, True, CREATE_HEIGHT)
    engine.execute(pid, CREATE_HEIGHT + 2)
    assert engine.balance == 900
