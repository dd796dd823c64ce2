"""Application keys for type-safe app configuration access."""

from aiohttp import web

from flatsite.config import Config
from flatsite.container import Container

container_key = web.AppKey("container", Container)
config_key = web.AppKey("config", Config)
