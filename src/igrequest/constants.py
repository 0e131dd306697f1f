"""Constants describing the Android app build that requests impersonate.

These values are part of the contract with the remote API: the server
checks the signature key version, capabilities and app id against the
client build it expects, so they are supplied verbatim and never computed.
"""

# Request signing
SIGNATURE_KEY = '9193488027538fd3450b83b7d05286d4ca9599a0f7eeed90d8c85925698a05dc'
SIGNATURE_VERSION = '4'

# Endpoints
API_HOST = 'i.instagram.com'
API_URL = f'https://{API_HOST}/api/v1'

# App build
APP_VERSION = '121.0.0.29.119'
APP_VERSION_CODE = '185203708'
BLOKS_VERSION_ID = '1b030ce63a06c25f3e4de6aaaf6802fe1e76401bc5ab6e5fb85ed6c2d333e0c7'
FACEBOOK_ANALYTICS_APPLICATION_ID = '567067343352427'

# Client profile
HEADER_CAPABILITIES = '3brTvw=='
HEADER_CONNECTION_TYPE = 'WIFI'
LANGUAGE = 'en_US'

# Android version/dpi/resolution/manufacturer/model/device/cpu
DEVICE_STRING = '26/8.0.0; 480dpi; 1080x1920; samsung; SM-G930F; herolte; samsungexynos8890'

# Response headers copied into the session state
HEADER_SET_WWW_CLAIM = 'x-ig-set-www-claim'
HEADER_SET_AUTHORIZATION = 'ig-set-authorization'
HEADER_SET_PASSWORD_ENCRYPTION_KEY_ID = 'ig-set-password-encryption-key-id'
HEADER_SET_PASSWORD_ENCRYPTION_PUB_KEY = 'ig-set-password-encryption-pub-key'
