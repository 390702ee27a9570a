#!/usr/bin/env python3
"""
Pre-push / production readiness checks.
Run from backend dir with project venv active: python scripts/pre_push_checks.py
"""
import sys
from pathlib import Path

BACKEND = Path(__file__).resolve().parent.parent
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))


def check_imports():
    from nuclear.main import app
    paths = {getattr(r, "path", "") for r in app.routes}
    for prefix in ("/api/health", "/api/users", "/api/blocks", "/api/folders", "/api/quizzes",
                   "/api/questions", "/api/topics", "/api/fill-in-the-blanks", "/api/points-updates"):
        assert prefix in paths, f"route {prefix} not registered"
    return "imports"


def check_error_kinds():
    from nuclear.errors import ErrorKind, STATUS_BY_KIND
    missing = [k.value for k in ErrorKind if k not in STATUS_BY_KIND]
    assert not missing, f"error kinds without a status: {missing}"
    return "error_kinds"


def check_rate_limit_prune():
    from nuclear.ratelimit import FixedWindowRateLimiter, MemoryRateLimitStore
    now = [1000.0]
    store = MemoryRateLimitStore(clock=lambda: now[0])
    limiter = FixedWindowRateLimiter(store, limit=2, window_seconds=60)
    assert limiter.hit("a").allowed and limiter.hit("a").allowed
    assert not limiter.hit("a").allowed
    limiter.hit("b")
    now[0] += 61
    assert store.prune() == 2 and len(store) == 0
    assert limiter.hit("a").allowed
    return "rate_limit_prune"


def check_init_db():
    from nuclear.database import init_db, SessionLocal, check_database
    init_db()
    db = SessionLocal()
    try:
        check_database(db)
    finally:
        db.close()
    return "init_db"


def main():
    checks = [check_imports, check_error_kinds, check_rate_limit_prune, check_init_db]
    for fn in checks:
        try:
            name = fn()
            print(f"OK {name}")
        except Exception as e:
            print(f"FAIL {fn.__name__}: {e}")
            return 1
    print("All pre-push checks passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
