from __future__ import annotations

import pytest

from pynojs import DirectiveProcessor, EngineConfig, StateStore

PAGE = """
<html lang="en">
<body>
  <header>
    <div id="greeting" [if]="loggedIn" [then]="#welcome"></div>
    <div id="admin" [elseif]="isAdmin">Admin tools</div>
    <div id="login" [else]>Please sign in</div>
  </header>

  <ul id="orders">
    <li [foreach]="order" [from]="orders" [index]="n" [else]="#noOrders">#{n} {order.item}</li>
  </ul>

  <nav [switch]="tab">
    <a id="tab-home" [case]="home">Home</a>
    <a id="tab-orders" [case]="orders">Orders</a>
    <a id="tab-other" [default]>Other</a>
  </nav>

  <p id="count">Orders: <span id="count-value" [bind]="orderCount">0</span></p>
  <p id="title" [translate.pt]="title">Your account</p>

  <template id="welcome" [set]="user"><h1>Welcome back, {user.condition}!</h1></template>
  <template id="noOrders"><li class="empty">No orders</li></template>
</body>
</html>
"""


@pytest.mark.e2e
def test_full_page_render() -> None:
    store = StateStore(
        {
            "loggedIn": True,
            "isAdmin": True,
            "orders": [{"item": "Book"}, {"item": "Lamp"}],
            "tab": "orders",
            "orderCount": 2,
        }
    )
    processor = DirectiveProcessor.from_markup(PAGE, config=EngineConfig(language="pt"), store=store)
    processor.set_translations("pt", {"title": "A sua conta"})

    processor.process_all()

    host = processor.host
    select = host.select

    greeting = select("#greeting")
    assert host.get_inner_html(greeting) == "<h1>Welcome back, true!</h1>"
    assert host.get_style(greeting)["display"] == "block"
    assert host.get_style(select("#admin"))["display"] == "none"
    assert host.get_style(select("#login"))["display"] == "none"

    rendered = [host.get_text(li).strip() for li in host.query_tag(select("#orders"), "li")]
    assert rendered[:2] == ["#0 Book", "#1 Lamp"]

    assert host.get_style(select("#tab-orders"))["display"] == "block"
    assert host.get_style(select("#tab-home"))["display"] == "none"
    assert host.get_style(select("#tab-other"))["display"] == "none"

    assert host.get_text(select("#count-value")) == "2"
    store.set_state("orderCount", 3)
    assert host.get_text(select("#count-value")) == "3"

    assert host.get_text(select("#title")) == "A sua conta"


@pytest.mark.e2e
def test_logged_out_page_shows_fallback_and_empty_state() -> None:
    store = StateStore({"orders": []})
    processor = DirectiveProcessor.from_markup(PAGE, store=store)

    processor.process_all()

    host = processor.host
    assert host.get_style(host.select("#greeting"))["display"] == "none"
    assert host.get_style(host.select("#admin"))["display"] == "none"
    assert host.get_style(host.select("#login"))["display"] == "block"
    assert host.get_text(host.select("#orders .empty")) == "No orders"
    assert host.get_style(host.select("#tab-other"))["display"] == "block"
    assert host.get_text(host.select("#title")) == "Your account"
