def _normalize_db_url(url: str | None) -> str | None:
    # hosted postgres urls come as "postgres://..." ,the async engine needs "postgresql+asyncpg://..."
    if not url:
        return None
    if url.startswith("postgres://",):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _is_asyncpg_url(url: str) -> bool:
    return url.startswith("postgresql+asyncpg://")
