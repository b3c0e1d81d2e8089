"""Configure test paths and shared HTML fixtures."""
import sys
from pathlib import Path

import httpx
import pytest

# Add src/ to path so tests can import the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

ROOT_URL = "https://hypixel.net/forums/"
SECTION_URL = "https://hypixel.net/forums/news-and-announcements.4/"
THREAD_URL = "https://hypixel.net/threads/skyblock-0-20-1-update.5678/"

ROOT_HTML = """
<html><body>
<div class="node-title"><a href="/forums/rules.2/">Rules</a></div>
<div class="node-title"><a href="/forums/news-and-announcements.4/">News and Announcements</a></div>
<div class="node-title"><a href="/forums/shop.9/">Shop</a></div>
</body></html>
"""

SECTION_HTML = """
<html><body>
<div class="structItem-title"><a href="/threads/general-discussion.1111/">General Discussion</a></div>
<div class="structItem-title"><a href="/threads/skyblock-0-20-1-update.5678/">Hypixel SkyBlock 0.20.1 Update</a></div>
<div class="structItem-title"><a href="/threads/skyblock-0-20-update.1234/">SkyBlock 0.20 Update</a></div>
</body></html>
"""

THREAD_HTML = """
<html><body>
<h1 class="p-title"><span class="p-title-value">SkyBlock 0.20.1 Update</span></h1>
<article class="message">
  <div class="message-body">
    <div class="bbWrapper">
      <img src="//cdn.hypixel.net/banner.png">
      <h2>Intro</h2>
      <p>Hello <img src="/attachments/x.png"> world</p>
      <b>Changes</b>
      <ul><li>Fixed bugs</li><li>Added <i>things</i></li></ul>
      <div>Thanks for playing!</div>
    </div>
  </div>
</article>
<article class="message">
  <div class="message-body"><div class="bbWrapper"><p>First reply</p></div></div>
</article>
</body></html>
"""


def make_transport(pages, fail_urls=()):
    """MockTransport serving ``pages`` (url -> html); ``fail_urls`` raise a connect error."""
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url in fail_urls:
            raise httpx.ConnectError("connection refused", request=request)
        if url in pages:
            return httpx.Response(200, text=pages[url], headers={"Content-Type": "text/html"})
        return httpx.Response(404, text="not found")

    return httpx.MockTransport(handler)


@pytest.fixture
def forum_pages():
    return {
        ROOT_URL: ROOT_HTML,
        SECTION_URL: SECTION_HTML,
        THREAD_URL: THREAD_HTML,
    }
