def _post(client, headers, body="Hello world", **extra):
    return client.post("/posts", json={"body": body, **extra}, headers=headers)


def test_create_and_fetch_post(client, signup):
    a_id, _, a_headers = signup("Alice")

    resp = _post(client, a_headers, image="https://img.example.com/cat.png")
    assert resp.status_code == 201
    post = resp.json()
    assert post["creator_id"] == a_id
    assert post["likes"] == []
    assert post["comment_count"] == 0

    detail = client.get(f"/posts/{post['id']}", headers=a_headers).json()
    assert detail["post"]["body"] == "Hello world"
    assert detail["post"]["image"] == "https://img.example.com/cat.png"
    assert detail["comments"] == []


def test_create_post_needs_body(client, signup):
    _, _, a_headers = signup("Alice")

    resp = _post(client, a_headers, body="   ")

    assert resp.status_code == 422
    assert resp.json() == {"message": "Fill in text field"}


def test_missing_post_is_404(client, signup):
    _, _, a_headers = signup("Alice")

    resp = client.get("/posts/0123456789abcdef01234567", headers=a_headers)

    assert resp.status_code == 404
    assert resp.json() == {"message": "Post not found"}


def test_posts_listed_newest_first(client, signup):
    _, _, a_headers = signup("Alice")
    first = _post(client, a_headers, body="first").json()
    second = _post(client, a_headers, body="second").json()

    listing = client.get("/posts", headers=a_headers).json()

    assert [p["id"] for p in listing] == [second["id"], first["id"]]


def test_only_creator_can_update_or_delete(client, signup):
    _, _, a_headers = signup("Alice")
    _, _, b_headers = signup("Bob")
    post = _post(client, a_headers).json()

    resp = client.patch(f"/posts/{post['id']}", json={"body": "mine now"}, headers=b_headers)
    assert resp.status_code == 403
    assert resp.json() == {"message": "You can't update this post since you are not the creator"}

    resp = client.delete(f"/posts/{post['id']}", headers=b_headers)
    assert resp.status_code == 403
    assert resp.json() == {"message": "You can't delete this post since you are not the creator"}

    resp = client.patch(f"/posts/{post['id']}", json={"body": "edited"}, headers=a_headers)
    assert resp.status_code == 200
    assert resp.json()["body"] == "edited"


def test_delete_post_removes_comments_and_bookmarks(client, signup):
    _, _, a_headers = signup("Alice")
    _, _, b_headers = signup("Bob")
    post = _post(client, a_headers).json()
    client.post(f"/comments/{post['id']}", json={"comment": "nice"}, headers=b_headers)
    client.post(f"/posts/{post['id']}/bookmark", headers=b_headers)

    resp = client.delete(f"/posts/{post['id']}", headers=a_headers)

    assert resp.status_code == 200
    assert client.get(f"/posts/{post['id']}", headers=a_headers).status_code == 404
    assert client.get("/users/bookmarks", headers=b_headers).json() == []


def test_like_toggles(client, signup):
    _, _, a_headers = signup("Alice")
    b_id, _, b_headers = signup("Bob")
    post = _post(client, a_headers).json()

    resp = client.post(f"/posts/{post['id']}/like", headers=b_headers)
    assert resp.json() == {"liked": True, "likes": [b_id]}

    resp = client.post(f"/posts/{post['id']}/like", headers=b_headers)
    assert resp.json() == {"liked": False, "likes": []}


def test_bookmark_toggles_and_lists(client, signup):
    _, _, a_headers = signup("Alice")
    _, _, b_headers = signup("Bob")
    post = _post(client, a_headers).json()

    resp = client.post(f"/posts/{post['id']}/bookmark", headers=b_headers)
    assert resp.json() == {"bookmarked": True, "bookmarks": [post["id"]]}
    assert [p["id"] for p in client.get("/users/bookmarks", headers=b_headers).json()] == [post["id"]]

    resp = client.post(f"/posts/{post['id']}/bookmark", headers=b_headers)
    assert resp.json() == {"bookmarked": False, "bookmarks": []}
    assert client.get("/users/bookmarks", headers=b_headers).json() == []


def test_bookmark_missing_post_is_404(client, signup):
    _, _, a_headers = signup("Alice")

    resp = client.post("/posts/0123456789abcdef01234567/bookmark", headers=a_headers)

    assert resp.status_code == 404


def test_following_feed_and_user_posts(client, signup):
    a_id, _, a_headers = signup("Alice")
    _, _, b_headers = signup("Bob")
    c_id, _, c_headers = signup("Carol")
    from_a = _post(client, a_headers, body="from alice").json()
    _post(client, c_headers, body="from carol")

    assert client.get("/posts/following", headers=b_headers).json() == []

    client.post(f"/users/{a_id}/follow-unfollow", headers=b_headers)
    feed = client.get("/posts/following", headers=b_headers).json()
    assert [p["id"] for p in feed] == [from_a["id"]]

    by_carol = client.get(f"/users/{c_id}/posts", headers=a_headers).json()
    assert [p["body"] for p in by_carol] == ["from carol"]


def test_posts_of_unknown_user_is_404(client, signup):
    _, _, a_headers = signup("Alice")

    resp = client.get("/users/0123456789abcdef01234567/posts", headers=a_headers)

    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found"}
