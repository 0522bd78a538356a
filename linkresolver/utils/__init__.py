from linkresolver.utils.config import app_env, app_name, app_prefix, load_config, ResolverConfig
from linkresolver.utils.helpers import (
    base_url,
    get_short_url,
    expiry_from_ttl,
    seconds_until,
    require_environment,
    guarantee_500_response,
)
from linkresolver.utils.canonicalizer import canonicalize, TRACKING_PARAMS
from linkresolver.utils.shortener import generate_shortcode
from linkresolver.utils.logging import initialize_logging


__all__ = [
    'canonicalize',
    'TRACKING_PARAMS',
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'ResolverConfig',
    'base_url',
    'get_short_url',
    'expiry_from_ttl',
    'seconds_until',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
