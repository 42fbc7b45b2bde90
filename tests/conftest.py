from tests.fixtures.upstream_fixtures import (  # noqa: F401
    client,
    settings,
    upload_dir,
    upstream,
)
