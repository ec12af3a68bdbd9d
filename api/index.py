# api/index.py
# Serverless entrypoint: exposes the WSGI app as `app`.
from tabsplit.app import create_app

app = create_app()

# Vercel ignores this block, but it's useful for local testing
if __name__ == '__main__':
    app.run(debug=True, port=5000)
