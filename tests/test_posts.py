def test_create_failure_post(client, register, create_post):
    user = register()
    post = create_post(user["headers"], category="COLLEGE")

    assert post["category"] == "COLLEGE"
    assert post["whatFailed"] == "Forgot to check mirrors"
    assert post["lessonLearned"] == "Mirrors first, then signal"
    assert "contents" not in post
    assert post["authorId"] == user["id"]
    assert post["author"] == {"id": user["id"], "username": "loser", "nickname": "Big Loser"}
    assert post["_count"] == {"comments": 0, "votes": 0}
    assert "createdAt" in post


def test_create_general_post(client, register):
    user = register()
    response = client.post("/api/posts", json={
        "title": "Burnt the toast",
        "category": "GENERAL",
        "contents": "Again.",
    }, headers=user["headers"])
    assert response.status_code == 201
    post = response.json()
    assert post["contents"] == "Again."
    assert "whatFailed" not in post
    assert "lessonLearned" not in post


def test_general_post_rejects_filled_failure_fields(client, register):
    user = register()
    response = client.post("/api/posts", json={
        "title": "Mixed up",
        "category": "GENERAL",
        "contents": "text",
        "whatFailed": "not allowed here",
        "lessonLearned": "",
    }, headers=user["headers"])
    assert response.status_code == 400
    assert response.json()["errors"][0]["type"] == "extra_forbidden"


def test_failure_post_rejects_filled_contents(client, register):
    user = register()
    response = client.post("/api/posts", json={
        "title": "Mixed up",
        "category": "LIFE",
        "whatFailed": "a",
        "lessonLearned": "b",
        "contents": "not allowed here",
    }, headers=user["headers"])
    assert response.status_code == 400


def test_unknown_post_field_is_rejected(client, register):
    user = register()
    response = client.post("/api/posts", json={
        "title": "Extra",
        "category": "GENERAL",
        "contents": "text",
        "mood": "",
    }, headers=user["headers"])
    assert response.status_code == 400


def test_general_post_from_full_form(client, register):
    # The web form always submits every text field, blank when unused
    user = register()
    response = client.post("/api/posts", json={
        "title": "Burnt the toast",
        "category": "GENERAL",
        "whatFailed": "",
        "lessonLearned": "",
        "contents": "Again.",
    }, headers=user["headers"])
    assert response.status_code == 201, response.text
    post = response.json()
    assert post["contents"] == "Again."
    assert "whatFailed" not in post


def test_failure_post_from_full_form(client, register):
    user = register()
    response = client.post("/api/posts", json={
        "title": "Dropped calculus",
        "category": "COLLEGE",
        "whatFailed": "Skipped every lecture",
        "lessonLearned": "Show up",
        "contents": "",
    }, headers=user["headers"])
    assert response.status_code == 201, response.text
    post = response.json()
    assert post["whatFailed"] == "Skipped every lecture"
    assert post["lessonLearned"] == "Show up"
    assert "contents" not in post


def test_failure_post_accepts_null_contents(client, register):
    user = register()
    response = client.post("/api/posts", json={
        "title": "Pitch deck",
        "category": "ENTREPRENEURS",
        "whatFailed": "No market",
        "lessonLearned": "Talk to customers",
        "contents": None,
    }, headers=user["headers"])
    assert response.status_code == 201, response.text


def test_failure_post_requires_both_fields(client, register):
    user = register()
    response = client.post("/api/posts", json={
        "title": "Half a story",
        "category": "ENTREPRENEURS",
        "whatFailed": "The startup",
    }, headers=user["headers"])
    assert response.status_code == 400


def test_unknown_category_is_rejected(client, register):
    user = register()
    response = client.post("/api/posts", json={
        "title": "Whatever",
        "category": "SPORTS",
        "contents": "text",
    }, headers=user["headers"])
    assert response.status_code == 400


def test_title_length_is_limited(client, register):
    user = register()
    response = client.post("/api/posts", json={
        "title": "x" * 151,
        "category": "GENERAL",
        "contents": "text",
    }, headers=user["headers"])
    assert response.status_code == 400


def test_create_post_requires_auth(client):
    response = client.post("/api/posts", json={
        "title": "Anonymous",
        "category": "GENERAL",
        "contents": "text",
    })
    assert response.status_code == 401


def test_create_post_rejects_bad_token(client):
    response = client.post("/api/posts", json={
        "title": "Forged",
        "category": "GENERAL",
        "contents": "text",
    }, headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_list_posts_newest_first(client, register, create_post):
    user = register()
    first = create_post(user["headers"], title="first")
    second = create_post(user["headers"], title="second")

    response = client.get("/api/posts")
    assert response.status_code == 200
    ids = [post["id"] for post in response.json()]
    assert ids == [second["id"], first["id"]]


def test_list_posts_filters_by_category(client, register, create_post):
    user = register()
    create_post(user["headers"], category="LIFE")
    college = create_post(user["headers"], category="COLLEGE")

    response = client.get("/api/posts", params={"category": "COLLEGE"})
    assert response.status_code == 200
    assert [post["id"] for post in response.json()] == [college["id"]]


def test_list_posts_rejects_unknown_category(client):
    response = client.get("/api/posts", params={"category": "SPORTS"})
    assert response.status_code == 400
    assert response.json()["message"].startswith("category must be one of")


def test_blank_category_lists_everything(client, register, create_post):
    user = register()
    life = create_post(user["headers"], category="LIFE")
    college = create_post(user["headers"], category="COLLEGE")

    response = client.get("/api/posts?category=")
    assert response.status_code == 200
    assert [post["id"] for post in response.json()] == [college["id"], life["id"]]


def test_list_posts_reports_counts_and_own_vote(client, register, create_post):
    author = register(username="author")
    voter = register(username="voter")
    post = create_post(author["headers"])

    client.post(f"/api/posts/{post['id']}/comments", json={"content": "same"}, headers=voter["headers"])
    client.post(f"/api/posts/{post['id']}/vote", json={"isUpvote": True}, headers=voter["headers"])

    [listed] = client.get("/api/posts", headers=voter["headers"]).json()
    assert listed["_count"] == {"comments": 1, "votes": 1}
    assert listed["userVote"] is True

    [anonymous] = client.get("/api/posts").json()
    assert "userVote" not in anonymous

    [not_voted] = client.get("/api/posts", headers=author["headers"]).json()
    assert "userVote" not in not_voted


def test_invalid_token_on_read_path_is_anonymous(client, register, create_post):
    user = register()
    create_post(user["headers"])
    response = client.get("/api/posts", headers={"Authorization": "Bearer expired.or.bogus"})
    assert response.status_code == 200
    assert "userVote" not in response.json()[0]


def test_get_post_detail(client, register, create_post):
    user = register()
    post = create_post(user["headers"])
    client.post(f"/api/posts/{post['id']}/vote", json={"isUpvote": False}, headers=user["headers"])

    response = client.get(f"/api/posts/{post['id']}", headers=user["headers"])
    assert response.status_code == 200
    detail = response.json()
    assert detail["id"] == post["id"]
    assert detail["netVotes"] == -1
    assert detail["userVote"] is False
    assert detail["comments"] == []
    assert detail["whatFailed"] == post["whatFailed"]


def test_get_missing_post_is_not_found(client):
    response = client.get("/api/posts/does-not-exist")
    assert response.status_code == 404
    body = response.json()
    assert body["statusCode"] == 404
    assert body["message"] == "Post not found"
    assert "timestamp" in body


def test_delete_own_post(client, register, create_post):
    user = register()
    post = create_post(user["headers"])

    response = client.delete(f"/api/posts/{post['id']}", headers=user["headers"])
    assert response.status_code == 204
    assert response.content == b""
    assert client.get(f"/api/posts/{post['id']}").status_code == 404


def test_delete_missing_post_is_not_found(client, register):
    user = register()
    response = client.delete("/api/posts/does-not-exist", headers=user["headers"])
    assert response.status_code == 404


def test_delete_someone_elses_post_is_forbidden(client, register, create_post):
    author = register(username="author")
    other = register(username="other")
    post = create_post(author["headers"])

    response = client.delete(f"/api/posts/{post['id']}", headers=other["headers"])
    assert response.status_code == 403
    assert response.json()["message"] == "You can only delete your own posts"
    assert client.get(f"/api/posts/{post['id']}").status_code == 200


def test_delete_requires_auth(client, register, create_post):
    user = register()
    post = create_post(user["headers"])
    assert client.delete(f"/api/posts/{post['id']}").status_code == 401


def test_delete_removes_comments_and_votes(client, register, create_post, db):
    from losers.models.comment import Comment
    from losers.models.vote import Vote

    user = register()
    post = create_post(user["headers"])
    client.post(f"/api/posts/{post['id']}/comments", json={"content": "hm"}, headers=user["headers"])
    client.post(f"/api/posts/{post['id']}/vote", json={"isUpvote": True}, headers=user["headers"])

    client.delete(f"/api/posts/{post['id']}", headers=user["headers"])

    assert db.query(Comment).filter(Comment.post_id == post["id"]).count() == 0
    assert db.query(Vote).filter(Vote.post_id == post["id"]).count() == 0


def test_root_banner(client):
    response = client.get("/")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["endpoints"]["posts"] == "/api/posts"
