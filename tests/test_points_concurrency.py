"""PointService under concurrent threads.

Covers: no lost updates on one user, independence of distinct users,
range invariant at the limits, and ledger/balance agreement afterwards.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from pointledger.core.exceptions import InsufficientBalanceError, LimitExceededError
from pointledger.models import MAX_BALANCE, PointAccount, replay
from pointledger.services.points import PointService
from pointledger.storage.memory import InMemoryAccountStore, InMemoryHistoryLedger


class SlowAccountStore(InMemoryAccountStore):
    """Yields between read and write so unsynchronized updates would collide."""

    def read(self, user_id: int) -> PointAccount:
        account = super().read(user_id)
        time.sleep(0)
        return account


@pytest.fixture
def slow_service():
    return PointService(SlowAccountStore(), InMemoryHistoryLedger())


def test_no_lost_update(slow_service):
    n = 300
    barrier = threading.Barrier(16)

    def charge_one(i):
        if i < 16:
            barrier.wait(timeout=5)
        return slow_service.charge(1, 1)

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(charge_one, range(n)))

    assert len(results) == n
    assert slow_service.get_balance(1).balance == n
    history = slow_service.get_history(1)
    assert len(history) == n
    assert len({r.id for r in history}) == n
    # Returned snapshots are exactly 1..n, one each
    assert sorted(a.balance for a in results) == list(range(1, n + 1))


def test_users_are_isolated(slow_service):
    users = range(1, 9)
    per_user = 50

    def work(user_id):
        for _ in range(per_user):
            slow_service.charge(user_id, 3)
        for _ in range(per_user):
            slow_service.use(user_id, 1)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(work, users))

    for user_id in users:
        assert slow_service.get_balance(user_id).balance == per_user * 2
        assert replay(slow_service.get_history(user_id)) == per_user * 2


def test_other_user_proceeds_while_one_is_locked(service):
    with service.locks.hold(1):
        with ThreadPoolExecutor(max_workers=1) as pool:
            account = pool.submit(service.charge, 2, 100).result(timeout=5)
    assert account.balance == 100


def test_mixed_charge_and_use_conserves(slow_service):
    slow_service.charge(1, 500)

    def op(i):
        try:
            if i % 2:
                slow_service.charge(1, 10)
                return ("charge", True)
            slow_service.use(1, 25)
            return ("use", True)
        except InsufficientBalanceError:
            return ("use", False)

    with ThreadPoolExecutor(max_workers=16) as pool:
        outcomes = list(pool.map(op, range(400)))

    charged = sum(1 for kind, ok in outcomes if kind == "charge" and ok)
    used = sum(1 for kind, ok in outcomes if kind == "use" and ok)
    balance = slow_service.get_balance(1).balance

    assert balance == 500 + 10 * charged - 25 * used
    assert balance >= 0
    assert replay(slow_service.get_history(1)) == balance
    assert len(slow_service.get_history(1)) == 1 + charged + used


def test_limit_holds_under_contention(slow_service):
    slow_service.charge(1, MAX_BALANCE - 5)

    def charge_one(_):
        try:
            slow_service.charge(1, 1)
            return True
        except LimitExceededError:
            return False

    with ThreadPoolExecutor(max_workers=16) as pool:
        outcomes = list(pool.map(charge_one, range(40)))

    assert sum(outcomes) == 5
    assert slow_service.get_balance(1).balance == MAX_BALANCE


def test_floor_holds_under_contention(slow_service):
    slow_service.charge(1, 7)

    def use_one(_):
        try:
            slow_service.use(1, 1)
            return True
        except InsufficientBalanceError:
            return False

    with ThreadPoolExecutor(max_workers=16) as pool:
        outcomes = list(pool.map(use_one, range(40)))

    assert sum(outcomes) == 7
    assert slow_service.get_balance(1).balance == 0
    assert slow_service.locks.active_keys() == 0
