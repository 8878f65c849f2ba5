"""
store.py — Where the Request Gate keeps its state.

Three pieces of state survive between requests:

  - the violation log        (rolling, pruned by age)
  - suspicious client records (violation count + first-seen time per address)
  - the blocked address set  (never pruned; cleared only on restart or by an operator)

MemoryGateStore keeps them in process memory behind a lock. That is correct
for a single long-running process and resets on restart. MongoGateStore puts
them in MongoDB so several instances (or serverless invocations) agree on who
is blocked.

The gate talks to either through the GateStore interface, so tests can hand a
fresh store to every gate instead of sharing module-level globals.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from threading import Lock
from typing import Any, Sequence

from pymongo import ReturnDocument

from careertools.security.violations import (
    SecurityViolation,
    Severity,
    ViolationKind,
)


@dataclass
class SuspiciousClientRecord:
    violation_count: int
    first_seen_at: datetime


class GateStore(ABC):
    @abstractmethod
    async def is_blocked(self, address: str) -> bool: ...

    @abstractmethod
    async def block(self, address: str, now: datetime) -> None: ...

    @abstractmethod
    async def unblock(self, address: str) -> bool:
        """Remove *address* from the blocked set. True if it was blocked."""

    @abstractmethod
    async def record_violations(
        self,
        address: str,
        violations: Sequence[SecurityViolation],
        now: datetime,
    ) -> SuspiciousClientRecord:
        """Append *violations* to the log and add them to the client's count."""

    @abstractmethod
    async def prune(self, cutoff: datetime) -> None:
        """Drop log entries and suspicion records older than *cutoff*."""

    @abstractmethod
    async def violations_since(self, since: datetime) -> list[SecurityViolation]: ...

    @abstractmethod
    async def suspicious_clients(self) -> dict[str, SuspiciousClientRecord]: ...

    @abstractmethod
    async def blocked_addresses(self) -> list[str]: ...

    @abstractmethod
    async def reset(self) -> None: ...


class MemoryGateStore(GateStore):
    """In-process store. The lock keeps it safe under threaded servers too."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._violations: list[SecurityViolation] = []
        self._suspicious: dict[str, SuspiciousClientRecord] = {}
        self._blocked: set[str] = set()

    async def is_blocked(self, address: str) -> bool:
        with self._lock:
            return address in self._blocked

    async def block(self, address: str, now: datetime) -> None:
        with self._lock:
            self._blocked.add(address)

    async def unblock(self, address: str) -> bool:
        with self._lock:
            if address not in self._blocked:
                return False
            self._blocked.discard(address)
            self._suspicious.pop(address, None)
            return True

    async def record_violations(self, address, violations, now):
        with self._lock:
            self._violations.extend(violations)
            record = self._suspicious.get(address)
            if record is None:
                record = SuspiciousClientRecord(violation_count=0, first_seen_at=now)
                self._suspicious[address] = record
            record.violation_count += len(violations)
            return SuspiciousClientRecord(record.violation_count, record.first_seen_at)

    async def prune(self, cutoff: datetime) -> None:
        with self._lock:
            self._violations = [v for v in self._violations if v.observed_at > cutoff]
            for address in [a for a, r in self._suspicious.items() if r.first_seen_at < cutoff]:
                del self._suspicious[address]

    async def violations_since(self, since: datetime) -> list[SecurityViolation]:
        with self._lock:
            return [v for v in self._violations if v.observed_at > since]

    async def suspicious_clients(self) -> dict[str, SuspiciousClientRecord]:
        with self._lock:
            return {
                address: SuspiciousClientRecord(r.violation_count, r.first_seen_at)
                for address, r in self._suspicious.items()
            }

    async def blocked_addresses(self) -> list[str]:
        with self._lock:
            return sorted(self._blocked)

    async def reset(self) -> None:
        with self._lock:
            self._violations.clear()
            self._suspicious.clear()
            self._blocked.clear()


# ── MongoDB ───────────────────────────────────────────────────────────────────

VIOLATIONS_COLLECTION = "security_violations"
SUSPICIOUS_COLLECTION = "suspicious_clients"
BLOCKED_COLLECTION = "blocked_addresses"


def _violation_to_doc(violation: SecurityViolation) -> dict[str, Any]:
    return {
        "kind": violation.kind.value,
        "client_address": violation.client_address,
        "user_agent": violation.user_agent,
        "severity": violation.severity.value,
        "details": dict(violation.details),
        "observed_at": violation.observed_at,
    }


def _doc_to_violation(doc: dict[str, Any]) -> SecurityViolation:
    return SecurityViolation(
        kind=ViolationKind(doc["kind"]),
        client_address=doc["client_address"],
        user_agent=doc.get("user_agent", ""),
        severity=Severity(doc["severity"]),
        details=doc.get("details") or {},
        observed_at=doc["observed_at"],
    )


class MongoGateStore(GateStore):
    """
    MongoDB-backed store (Motor).

    Suspicion counts are bumped with a single atomic $inc upsert, so two
    instances recording violations for the same address never lose a count.
    Addresses are used as _id in both the suspicion and blocked collections.
    """

    def __init__(self, db) -> None:
        self._db = db

    async def ensure_indexes(self) -> None:
        """Indexes for the age-based prune and the metrics time-range query."""
        await self._db[VIOLATIONS_COLLECTION].create_index([("observed_at", -1)])
        await self._db[SUSPICIOUS_COLLECTION].create_index([("first_seen_at", 1)])

    async def is_blocked(self, address: str) -> bool:
        doc = await self._db[BLOCKED_COLLECTION].find_one({"_id": address})
        return doc is not None

    async def block(self, address: str, now: datetime) -> None:
        await self._db[BLOCKED_COLLECTION].update_one(
            {"_id": address},
            {"$setOnInsert": {"blocked_at": now}},
            upsert=True,
        )

    async def unblock(self, address: str) -> bool:
        result = await self._db[BLOCKED_COLLECTION].delete_one({"_id": address})
        await self._db[SUSPICIOUS_COLLECTION].delete_one({"_id": address})
        return result.deleted_count > 0

    async def record_violations(self, address, violations, now):
        if violations:
            await self._db[VIOLATIONS_COLLECTION].insert_many(
                [_violation_to_doc(v) for v in violations]
            )
        doc = await self._db[SUSPICIOUS_COLLECTION].find_one_and_update(
            {"_id": address},
            {
                "$inc": {"violation_count": len(violations)},
                "$setOnInsert": {"first_seen_at": now},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return SuspiciousClientRecord(doc["violation_count"], doc["first_seen_at"])

    async def prune(self, cutoff: datetime) -> None:
        await self._db[VIOLATIONS_COLLECTION].delete_many({"observed_at": {"$lte": cutoff}})
        await self._db[SUSPICIOUS_COLLECTION].delete_many({"first_seen_at": {"$lt": cutoff}})

    async def violations_since(self, since: datetime) -> list[SecurityViolation]:
        cursor = self._db[VIOLATIONS_COLLECTION].find({"observed_at": {"$gt": since}})
        return [_doc_to_violation(doc) for doc in await cursor.to_list(length=None)]

    async def suspicious_clients(self) -> dict[str, SuspiciousClientRecord]:
        cursor = self._db[SUSPICIOUS_COLLECTION].find({})
        return {
            doc["_id"]: SuspiciousClientRecord(doc["violation_count"], doc["first_seen_at"])
            for doc in await cursor.to_list(length=None)
        }

    async def blocked_addresses(self) -> list[str]:
        cursor = self._db[BLOCKED_COLLECTION].find({})
        return sorted(doc["_id"] for doc in await cursor.to_list(length=None))

    async def reset(self) -> None:
        for name in (VIOLATIONS_COLLECTION, SUSPICIOUS_COLLECTION, BLOCKED_COLLECTION):
            await self._db[name].delete_many({})
