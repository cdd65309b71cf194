from motorbuy.main import app

# Vercel looks up the ASGI application under this name
handler = app
