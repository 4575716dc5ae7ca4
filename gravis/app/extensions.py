from flask_cors import CORS

from gravis.app.common.backend import BackendClient

# Singletons (initialized in app factory)
cors = CORS()
backend = BackendClient()
