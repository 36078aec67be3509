DEBUG = True

INSTALLED_APPS = [
    "sendgrid_rt",
]

ROOT_URLCONF = "sendgrid_rt.urls"

APPEND_SLASH = False

MIDDLEWARE = [
    "sendgrid_rt.middleware.SharedKeyMiddleware",
]

SENDGRID_RT = {
    "RT_URL": "http://rt.example.test/",
    "KEY": "test-key",
    "DEFAULT": {"queue": "General", "action": "correspond"},
    "RULES": [
        {"address": "support@example.com", "queue": "Support", "action": "correspond"},
        {"address": "billing@example.com", "queue": "Billing", "action": "correspond"},
        {"address": "notes@example.com", "queue": "Support", "action": "comment"},
    ],
    "CONNECT_TIMEOUT": 5,
    "TIMEOUT": 20,
}

USE_TZ = True

SECRET_KEY = "test-secret-key-not-for-production"
