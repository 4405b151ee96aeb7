from __future__ import annotations

import os
from typing import Optional, Protocol

from ..core.constants import LEDGER_SALT_ENV


class SecretStore(Protocol):
    def get_ledger_salt(self) -> Optional[str]:
        raise NotImplementedError


class EnvironmentSecretStore(SecretStore):
    """Reads the salt from the process environment on every call.

    Provisioning and rotation happen outside this process; a salt fixed in the
    environment is picked up by the next run without a restart.
    """

    def __init__(self, env_var: str = LEDGER_SALT_ENV):
        self._env_var = env_var

    def get_ledger_salt(self) -> Optional[str]:
        return os.environ.get(self._env_var)
