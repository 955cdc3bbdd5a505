import sys

import httpx
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import text

from tuition.config import settings
from tuition.db import engine


GREEN = '\033[32m'
RED = '\033[31m'
RESET = '\033[0m'


def run_check(name, fn):
    try:
        message = fn() or ''
        suffix = f' - {message}' if message else ''
        print(f'{GREEN}PASS{RESET} {name}{suffix}')
        return True
    except Exception as exc:
        print(f'{RED}FAIL{RESET} {name} - {exc}')
        return False


def check_db_connectivity():
    with engine.connect() as conn:
        conn.execute(text('SELECT 1'))
    return 'connect ok'


def check_alembic_head():
    cfg = Config('alembic.ini')
    script = ScriptDirectory.from_config(cfg)
    heads = set(script.get_heads())
    if not heads:
        raise RuntimeError('No alembic heads found in repository')

    with engine.connect() as conn:
        current = MigrationContext.configure(conn).get_current_revision()

    if current is None:
        raise RuntimeError('No migration version in DB (run alembic upgrade head)')
    if current not in heads:
        raise RuntimeError(f'DB revision {current} is not at head {sorted(heads)}')
    return f'current={current}'


def check_required_env():
    required = {
        'DATABASE_URL': settings.database_url,
        'AI_HELPER_URL': settings.ai_helper_url,
        'CENTER_NAME': settings.center_name,
    }
    missing = [key for key, value in required.items() if not str(value).strip()]
    if missing:
        raise RuntimeError(f'Missing env vars: {", ".join(missing)}')
    return 'all required vars present'


def check_ai_helper_reachable():
    if not settings.ai_helper_url:
        raise RuntimeError('AI_HELPER_URL is empty')
    res = httpx.options(settings.ai_helper_url, timeout=8)
    if res.status_code >= 500:
        raise RuntimeError(f'HTTP {res.status_code} from AI helper')
    return f'HTTP {res.status_code}'


def main():
    checks = [
        ('database', check_db_connectivity),
        ('migrations', check_alembic_head),
        ('environment', check_required_env),
        ('ai_helper', check_ai_helper_reachable),
    ]
    results = [run_check(name, fn) for name, fn in checks]
    return 0 if all(results) else 1


if __name__ == '__main__':
    sys.exit(main())
