"""
Minimal subdomain login form
"""

from html import escape
import json

LOGIN_FORM = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Access Required - {subdomain}</title></head>
<body>
  <h1>{subdomain}</h1>
  <p>This documentation site is password protected.</p>
  <form id="login">
    <input type="password" name="password" placeholder="Password" required>
    <button type="submit">Continue</button>
  </form>
  <p id="error" hidden>Invalid password</p>
  <script>
    document.getElementById("login").addEventListener("submit", async (event) => {{
      event.preventDefault();
      const response = await fetch("/api/subdomain/login", {{
        method: "POST",
        headers: {{"Content-Type": "application/json"}},
        body: JSON.stringify({{subdomain: {subdomain_json}, password: event.target.password.value}})
      }});
      if (response.ok) {{
        window.location = (await response.json()).redirect_url;
      }} else {{
        document.getElementById("error").hidden = false;
      }}
    }});
  </script>
</body>
</html>
"""


def render_login_form(subdomain: str) -> str:
    """Subdomain must already be a validated label"""
    return LOGIN_FORM.format(subdomain=escape(subdomain), subdomain_json=json.dumps(subdomain))
