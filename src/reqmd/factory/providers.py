"""Built-in default providers."""

import os
from typing import Mapping

from reqmd.http.address import AddressString
from reqmd.parser.base import GlobalDefaults

DEFAULT_PREFIX = "REQMD_"


class EnvProvider:
    """Reads global defaults from prefixed environment variables.

    With the default prefix:

    - ``REQMD_HEADER_<name>`` adds header ``<name>``
    - ``REQMD_QUERY_<name>`` adds query parameter ``<name>``
    - ``REQMD_SERVER`` replaces the server address

    Variables are applied in sorted name order.
    """

    name = "EnvProvider"

    def __init__(self, prefix: str = DEFAULT_PREFIX, env: Mapping[str, str] | None = None):
        self.prefix = prefix
        self.env = os.environ if env is None else env

    def apply(self, defaults: GlobalDefaults) -> None:
        for key in sorted(self.env):
            if not key.startswith(self.prefix):
                continue
            suffix = key[len(self.prefix):]
            value = self.env[key]

            if suffix.startswith("HEADER_") and len(suffix) > len("HEADER_"):
                defaults.headers.add(suffix[len("HEADER_"):], value)
            elif suffix.startswith("QUERY_") and len(suffix) > len("QUERY_"):
                defaults.query.add(suffix[len("QUERY_"):], value)
            elif suffix == "SERVER":
                defaults.server = AddressString.parse(value)
