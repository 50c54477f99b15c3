import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional
from urllib.parse import urlencode, urlparse, urlunparse

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30

# attribute name -> environment variable
ENV_VARS = {
    'api_url': 'HYDRA_API_URL',
    'ws_url': 'HYDRA_WS_URL',
    'submit_url': 'TRP_URL',
    'blockfrost_key': 'BLOCKFROST_API_KEY',
    'admin_signing_key': 'ADMIN_SIGNING_KEY',
}

SECRETS = {'blockfrost_key', 'admin_signing_key'}


def env(name, default=None, environ: Optional[Mapping[str, str]] = None):
    """Access to environment variables

    Empty values count as unset, so that `FOO=` in a shell or compose file
    does not sneak an empty URL past validation.
    """
    if environ is None:
        environ = os.environ
    value = environ.get(name)
    if value is None or value == '':
        return default
    return value


def clamp_network_id(raw) -> int:
    try:
        network_id = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(['HYDRA_NETWORK_ID (not an integer: {!r})'.format(raw)])
    if network_id < 0:
        return 0
    if network_id > 1:
        return 1
    return network_id


def parse_timeout(raw) -> float:
    try:
        timeout = float(raw)
    except (TypeError, ValueError):
        raise ConfigError(['HYDRA_TIMEOUT (not a number: {!r})'.format(raw)])
    if not timeout > 0:
        raise ConfigError(['HYDRA_TIMEOUT (must be positive: {!r})'.format(raw)])
    return timeout


def redact(value: Optional[str]) -> str:
    if not value:
        return '<unset>'
    return value[:10] + '...'


@dataclass
class HydraConfig:
    api_url: Optional[str] = None
    ws_url: Optional[str] = None
    submit_url: Optional[str] = None
    blockfrost_key: Optional[str] = field(default=None, repr=False)
    admin_signing_key: Optional[str] = field(default=None, repr=False)
    network_id: int = 0
    timeout: float = DEFAULT_TIMEOUT
    history: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'HydraConfig':
        values = {attr: env(var, environ=environ) for attr, var in ENV_VARS.items()}
        config = cls(
            network_id=clamp_network_id(env('HYDRA_NETWORK_ID', '0', environ)),
            timeout=parse_timeout(env('HYDRA_TIMEOUT', DEFAULT_TIMEOUT, environ)),
            history=env('HYDRA_HISTORY', '0', environ) in ('1', 'true', 'yes'),
            **values
        )
        for attr in SECRETS:
            if getattr(config, attr):
                logger.debug("%s: %s", ENV_VARS[attr], redact(getattr(config, attr)))
        return config

    def require(self, *attrs: str) -> 'HydraConfig':
        """Fail fast, naming every missing value at once."""
        missing = [ENV_VARS.get(a, a) for a in attrs if not getattr(self, a)]
        if missing:
            raise ConfigError(missing)
        return self

    def subscription_url(self) -> str:
        """The event stream URL, with replay of past events turned off
        unless history was asked for."""
        self.require('ws_url')
        parts = urlparse(self.ws_url)
        query = parts.query
        if 'history=' not in query:
            extra = urlencode({'history': 'yes' if self.history else 'no'})
            query = query + '&' + extra if query else extra
        return urlunparse(parts._replace(query=query))
