import pytest

from dac import errors


@pytest.mark.parametrize(
    "exc, err_code",
    [
        (errors.InvalidAmount(amount=-1), 100),
        (errors.InvalidRequest("bad"), 100),
        (errors.NotFound(proposal_id=1), 101),
        (errors.NoVotingPower(voter="x"), 102),
        (errors.ProposalRejected(proposal_id=1, votes_for=1, votes_against=1), 102),
        (errors.InsufficientFunds(requested=2, balance=1), 103),
        (errors.InsufficientTreasuryFunds(requested=2, balance=1), 103),
        (errors.VotingStillOpen(proposal_id=1, end_height=2, current_height=1), 104),
        (errors.VotingClosed(proposal_id=1), 105),
        (errors.AlreadyExecuted(proposal_id=1), 105),
        (errors.DuplicateVote(proposal_id=1, voter="x"), 106),
        (errors.TransferError(to="x", amount=1), 107),
    ],
)
def test_contract_error_codes(exc, err_code):
    assert isinstance(exc, errors.DACError)
    assert exc.err_code == err_code
    d = exc.to_dict()
    assert d["code"] == exc.code
    assert d["err_code"] == err_code


def test_string_form_is_compact_and_stable():
    e = errors.DuplicateVote(proposal_id=3, voter="donor1")
    assert str(e) == 'DAC_DUPLICATE_VOTE: duplicate vote [{"proposal_id":3,"voter":"donor1"}]'
    assert str(errors.DACError("plain")) == "DAC_ERROR: plain"
