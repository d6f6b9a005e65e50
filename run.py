import os
from fitcoach import create_app

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", "5000"))
    use_https = os.getenv("HTTPS", "0") == "1"
    if use_https:
        # Ad-hoc self-signed certificate for local HTTPS
        app.run(host="0.0.0.0", port=port, debug=True, ssl_context="adhoc")
    else:
        app.run(host="0.0.0.0", port=port, debug=True)
