from __future__ import annotations

"""Basic access authentication extension
-----------------------------------------
Builds a Chrome extension (base64 of a zip held in memory) that answers the
first HTTP basic-auth challenge with fixed credentials.
"""

import base64
import io
import json
import zipfile

EXTENSION_NAME = "recplay Basic Access Authentication Extension"

MANIFEST = {
    "manifest_version": 2,
    "name": EXTENSION_NAME,
    "version": "1.0.0",
    "permissions": ["*://*/*", "webRequest", "webRequestBlocking"],
    "background": {"scripts": ["background.js"]},
}

_BACKGROUND_TEMPLATE = """\
var username = {username};
var password = {password};

chrome.webRequest.onAuthRequired.addListener(
  function handler(details) {{
    if (username == null) {{
      return {{ cancel: true }};
    }}

    var authCredentials = {{ username: username, password: password }};
    username = password = null;

    return {{ authCredentials: authCredentials }};
  }},
  {{ urls: ['<all_urls>'] }},
  ['blocking']
);
"""


def background_script(username: str, password: str) -> str:
    # json.dumps yields valid, escaped JS string literals
    return _BACKGROUND_TEMPLATE.format(
        username=json.dumps(username),
        password=json.dumps(password),
    )


def build_basic_auth_extension(username: str, password: str) -> str:
    """Return the extension as a base64 string for ChromeOptions.add_encoded_extension."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("manifest.json", json.dumps(MANIFEST))
        zf.writestr("background.js", background_script(username, password))
    return base64.b64encode(buf.getvalue()).decode("ascii")
