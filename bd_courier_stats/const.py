"""Constants for BD Courier Customer Stats."""

PROVIDER_PATHAO = "pathao"
PROVIDER_STEADFAST = "steadfast"
PROVIDER_REDX = "redx"
PROVIDERS = (PROVIDER_PATHAO, PROVIDER_STEADFAST, PROVIDER_REDX)

CONF_PATHAO_USER = "pathao_user"
CONF_PATHAO_PASSWORD = "pathao_password"
CONF_STEADFAST_USER = "steadfast_user"
CONF_STEADFAST_PASSWORD = "steadfast_password"
CONF_REDX_USER = "redx_user"
CONF_REDX_PASSWORD = "redx_password"

CONF_KEYS = (
    CONF_PATHAO_USER,
    CONF_PATHAO_PASSWORD,
    CONF_STEADFAST_USER,
    CONF_STEADFAST_PASSWORD,
    CONF_REDX_USER,
    CONF_REDX_PASSWORD,
)

# Config key -> environment variable
ENV_MAPPING = {key: key.upper() for key in CONF_KEYS}

REQUEST_TIMEOUT = 30

COUNTRY_CODE = "88"
