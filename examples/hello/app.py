"""Hello World — the simplest wren app.

Demonstrates regex routes with captured groups, the HEAD fallback,
explicit status codes, and custom headers.

Run:
    python app.py
"""

from wren import App

app = App()


@app.get("/")
def index(ctx, args):
    ctx.content_type = "text/plain; charset=utf-8"
    ctx.ok("Hello, World!")


@app.get(r"/greet/(\w+)")
def greet(ctx, args):
    ctx.ok(f"<p>Hello, {args[0]}!</p>")


@app.get(r"/add/(\d+)/(\d+)")
def add(ctx, args):
    ctx.content_type = "application/json"
    ctx.ok(f'{{"sum": {int(args[0]) + int(args[1])}}}')


@app.post("/custom")
def custom(ctx, args):
    ctx.set_header("X-Custom", "wren")
    ctx.reply(201, "Created")


if __name__ == "__main__":
    app.run()
