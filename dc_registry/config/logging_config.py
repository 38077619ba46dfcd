import os
config = {
    'version': 1,
    'disable_existing_loggers': False,
    'filters': {
        'correlation_id': {
            '()': 'asgi_correlation_id.CorrelationIdFilter',
            'uuid_length': 32,
            'default_value': '-',
            },
        },
    'formatters': {
        'structFormatter': {
            'class': 'logging.Formatter',
            'format': '[%(correlation_id)s] %(message)s'
        }
    },
    'handlers': {
        'consoleHandler': {
            'class': 'logging.StreamHandler',
            'filters': ['correlation_id'],
            'level': 'DEBUG',
            'formatter': 'structFormatter'
        }
    },
    'loggers': {
        'root': {
            'handlers': ['consoleHandler'],
            'level': os.getenv('LOGGING_LEVEL_ROOT', 'INFO'),
            'propagate': False,
            'qualname': 'root'
        },
        'dc_registry': {
            'handlers': ['consoleHandler'],
            'level': os.getenv('LOGGING_LEVEL_REGISTRY', 'INFO'),
            'propagate': False,
            'qualname': 'dc_registry'
        },
        'pymongo': {
            'handlers': ['consoleHandler'],
            'level': os.getenv('LOGGING_LEVEL_MONGO', 'WARNING'),
            'propagate': False,
            'qualname': 'pymongo'
        },
        'uvicorn.access': {
            'handlers': ['consoleHandler'],
            'level': os.getenv('LOGGING_LEVEL_ACCESS', 'INFO'),
            'propagate': False,
            'qualname': 'uvicorn.access'
        }
    }
}
