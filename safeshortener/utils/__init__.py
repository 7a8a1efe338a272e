from safeshortener.utils.config import app_env, app_name, app_prefix, load_config, ServiceSettings
from safeshortener.utils.helpers import base_url, get_short_url, owner_id, client_ip, require_environment, guarantee_500_response
from safeshortener.utils.shortener import generate_shortcode, decode_shortcode, ShortCodeAllocator
from safeshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'decode_shortcode',
    'ShortCodeAllocator',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'ServiceSettings',
    'base_url',
    'get_short_url',
    'owner_id',
    'client_ip',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
