"""Shared constants for the rcstack bundle."""

from pathlib import Path

# Operator must replace this in .env before anything is provisioned
PLACEHOLDER_SENTINEL = "YOUR_UNRAID_IP"

# Defaults (overridable via .env)
DEFAULT_DATA_DIR = Path("/mnt/user/appdata/unraid-rocket.chat")
DEFAULT_NGINX_HOST = "localhost"
DEFAULT_NGINX_HTTPS_PORT = 60443
DEFAULT_NGINX_HTTP_PORT = 60080
DEFAULT_RC_HOST_PORT = 3000

# Bundle files (relative to the project directory)
ENV_FILENAME = ".env"
COMPOSE_FILENAME = "docker-compose.yml"
PROXY_TEMPLATE_FILENAME = "default.conf.template"
AUDIT_LOG_RELPATH = "logs/setup-audit.jsonl"

# Data tree (relative to DATA_DIR)
DATABASE_DIR = "database"
UPLOADS_DIR = "uploads"
PROXY_DIR = "proxy"
CERTS_DIR = "proxy/certs"
PROXY_CONF_FILENAME = "default.conf"
CERT_FILENAME = "rocketchat.crt"
KEY_FILENAME = "rocketchat.key"

# Proxy template
HTTPS_PORT_TOKEN = "__HTTPS_PORT__"

# TLS
CERT_VALIDITY_DAYS = 3650
CERT_KEY_SIZE = 2048
CERT_ORGANIZATION = "Unraid-RocketChat"
CERT_COUNTRY = "US"
