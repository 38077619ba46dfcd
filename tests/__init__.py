# Keep tests from reporting to Sentry or picking up a deployment's Mongo credentials
import os
os.environ['SENTRY_DSN'] = ''
os.environ['MONGO_USER'] = ''
os.environ['MONGO_PASS'] = ''
