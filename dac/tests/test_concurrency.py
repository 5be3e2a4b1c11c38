import threading

import pytest

from dac.errors import DuplicateVote, InsufficientFunds, InsufficientTreasuryFunds
from dac.tests import CREATE_HEIGHT, funded
from dac.treasury.state import TreasuryLedger
from dac.votes.ledger import VoteLedger

THREADS = 16


def _run_all(target, n=THREADS):
    barrier = threading.Barrier(n)
    outcomes = []
    lock = threading.Lock()

    def worker(i):
        barrier.wait()
        try:
            res = target(i)
        except Exception as e:  # collected and asserted on below
            res = e
        with lock:
            outcomes.append(res)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return outcomes


@pytest.mark.slow
def test_concurrent_duplicate_votes_only_one_wins():
    led = VoteLedger()
    outcomes = _run_all(lambda i: led.cast_vote(1, "donor1", 10, i % 2 == 0))
    winners = [o for o in outcomes if not isinstance(o, Exception)]
    assert len(winners) == 1
    assert all(isinstance(o, DuplicateVote) for o in outcomes if o not in winners)
    assert len(led) == 1


@pytest.mark.slow
def test_concurrent_debits_never_overdraw():
    led = TreasuryLedger()
    led.credit(1_000)
    outcomes = _run_all(lambda i: led.debit(100))
    ok = [o for o in outcomes if not isinstance(o, Exception)]
    assert len(ok) == 10
    assert all(isinstance(o, InsufficientFunds) for o in outcomes if o not in ok)
    assert led.balance == 0
    led.assert_consistent()


@pytest.mark.slow
def test_concurrent_engine_votes_and_executions(engine):
    voters = {f"donor{i}": 10 for i in range(THREADS)}
    funded(engine, **voters)
    pid = engine.propose("b", 100, "x", 10, CREATE_HEIGHT)

    names = list(voters)
    _run_all(lambda i: engine.vote(names[i], pid, True, 105))
    p = engine.get_proposal(pid)
    assert p.votes_for == 10 * THREADS
    assert p.voter_count == THREADS

    outcomes = _run_all(lambda i: engine.execute(pid, 111))
    assert sum(1 for o in outcomes if not isinstance(o, Exception)) == 1
    assert engine.balance == 10 * THREADS - 100
    engine.state.assert_consistent()


@pytest.mark.slow
def test_concurrent_executions_of_competing_proposals(engine):
    funded(engine, donor1=1_000)
    pids = [engine.propose(f"b{i}", 300, "x", 1, CREATE_HEIGHT) for i in range(THREADS)]
    for pid in pids:
        engine.vote("donor1", pid, True, CREATE_HEIGHT)

    outcomes = _run_all(lambda i: engine.execute(pids[i], CREATE_HEIGHT + 2))
    ok = [o for o in outcomes if not isinstance(o, Exception)]
    assert len(ok) == 3
    assert all(isinstance(o, InsufficientTreasuryFunds) for o in outcomes if o not in ok)
    assert engine.balance == 100
