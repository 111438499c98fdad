"""Counter — signed cookie sessions.

Counts visits per browser without any server-side state, lets the
visitor pick a name, and forgets everything on logout. A plain
preference cookie sits next to the session to show ``Cookie`` directly.

Run:
    WREN_SECRET=change-me python app.py
"""

import os
from urllib.parse import parse_qs

from wren import App, AppConfig, Cookie

app = App(
    AppConfig(
        secret_key=os.environ.get("WREN_SECRET", "dev-only-secret"),
        session_ttl=3600,
    )
)


@app.get("/")
def index(ctx, args):
    session = ctx.session()
    visits = session.get("visits", 0) + 1
    session.set("visits", visits)
    name = session.get("name") or "stranger"
    ctx.ok(f"<p>Hello {name}, this is visit #{visits}</p>")


@app.post("/login")
async def login(ctx, args):
    form = parse_qs(await ctx.request.text())
    name = form.get("name", [""])[0].strip()
    if not name:
        ctx.reply(400, "<p>name is required</p>")
        return
    ctx.session().set("name", name)
    ctx.set_header("Location", "/")
    ctx.reply(303)


@app.post("/logout")
def logout(ctx, args):
    ctx.session().clear()
    ctx.set_cookie(Cookie.expired("theme"))
    ctx.set_header("Location", "/")
    ctx.reply(303)


@app.put(r"/theme/(light|dark)")
def theme(ctx, args):
    cookie = Cookie.relative("theme", args[0], 30 * 86400)
    cookie.path = "/"
    ctx.set_cookie(cookie)
    ctx.reply(204)


if __name__ == "__main__":
    app.run()
