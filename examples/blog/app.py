import logging
import time
from examples import load_config
from pystack import Stack, HTTPError

config = load_config("blog/config.json")
app = Stack(**config)
admin = Stack(**config)
posts = {"1": "Hello, World!"}


@app.use()
def timer(request, response, next):
    start = time.time()
    next()
    logging.info("{} {} dispatched in {:.4f}s".format(
        request.method, request.original_url, time.time() - start))


@app.use("/posts")
def show_post(request, response, next):
    post_id = request.url.strip("/")
    if post_id not in posts:
        next(HTTPError(404, "No such post"))
    else:
        response.json({"id": post_id, "body": posts[post_id]})


# Everything mounted under /admin requires credentials.
@admin.use()
def auth(request, response, next):
    if request.headers.get("Authorization") != "Bearer hunter2":
        next(HTTPError(401, "Invalid credentials."))
    else:
        next()


@admin.use("/posts")
def create_post(request, response, next):
    if request.method != "POST":
        next()
        return
    post_id = str(len(posts) + 1)
    posts[post_id] = request.json["body"]
    response.status = 201
    response.json({"id": post_id})


app.use("/admin", admin)


@app.use()
def json_errors(error, request, response, next):
    response.status = getattr(error, "status", 500)
    response.json({"error": str(error)})


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.listen()
