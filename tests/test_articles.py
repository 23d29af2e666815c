"""
Tests for article CRUD, engagement and the public article views.
"""
from datetime import datetime, timedelta, timezone

from sqlmodel import select

from newsroom.db.models import Article, ArticleStatus, Category, Tag


def _tag_names(article_json):
    return {tag["name"] for tag in article_json["tags"]}


# ============================================================================
# Create / update
# ============================================================================

class TestCreateArticle:

    def test_create_defaults_to_draft(self, client, headers, users, category):
        response = client.post(
            "/articles",
            json={
                "title": "Hello",
                "content": "World",
                "summary": "Greeting",
                "categoryId": category.id,
                "tags": ["go", "rust"],
                "imageUrl": "https://img.example.com/1.png",
            },
            headers=headers["editor"],
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "DRAFT"
        assert body["authorId"] == users["editor"].id
        assert body["imageUrl"] == "https://img.example.com/1.png"
        assert body["author"]["name"] == "Ed Editor"
        assert body["category"]["name"] == "Technology"
        assert _tag_names(body) == {"go", "rust"}
        assert body["counts"] == {"likes": 0, "savedBy": 0}

    def test_timestamps_are_utc_aware(self):
        article = Article(title="t", content="c", category_id=1, author_id=1)
        assert article.created_at.tzinfo is timezone.utc
        assert article.updated_at.tzinfo is timezone.utc

    def test_readers_cannot_create(self, client, headers, category):
        response = client.post(
            "/articles",
            json={"title": "t", "content": "c", "categoryId": category.id},
            headers=headers["reader"],
        )
        assert response.status_code == 403
        assert response.json() == {"error": "Access denied"}

    def test_anonymous_cannot_create(self, client, category):
        response = client.post("/articles", json={"title": "t", "content": "c", "categoryId": category.id})
        assert response.status_code == 401

    def test_unknown_category(self, client, headers):
        response = client.post(
            "/articles", json={"title": "t", "content": "c", "categoryId": 42}, headers=headers["editor"]
        )
        assert response.status_code == 400

    def test_missing_title_is_a_bad_request(self, client, headers, category):
        response = client.post(
            "/articles", json={"content": "c", "categoryId": category.id}, headers=headers["editor"]
        )
        assert response.status_code == 400
        assert "title" in response.json()["error"]


class TestUpdateArticle:

    def test_replacing_tags_unlinks_without_deleting(self, client, headers, category, session):
        created = client.post(
            "/articles",
            json={"title": "Langs", "content": "...", "categoryId": category.id, "tags": ["go", "rust"]},
            headers=headers["editor"],
        ).json()

        response = client.put(
            f"/articles/{created['id']}", json={"tags": ["rust"]}, headers=headers["editor"]
        )

        assert response.status_code == 200
        assert _tag_names(response.json()) == {"rust"}
        assert _tag_names(client.get(f"/articles/{created['id']}").json()) == {"rust"}
        session.expire_all()
        assert {t.name for t in session.exec(select(Tag)).all()} == {"go", "rust"}

    def test_omitted_fields_are_kept(self, client, headers, make_article):
        article = make_article(title="Keep me", content="Old", tags=["py"])

        response = client.put(f"/articles/{article.id}", json={"content": "New"}, headers=headers["editor"])

        body = response.json()
        assert body["title"] == "Keep me"
        assert body["content"] == "New"
        assert _tag_names(body) == {"py"}

    def test_move_to_another_category(self, client, headers, make_article, session):
        other = Category(name="Science")
        session.add(other)
        session.commit()
        article = make_article()

        response = client.put(
            f"/articles/{article.id}", json={"categoryId": other.id}, headers=headers["editor"]
        )
        assert response.json()["category"]["name"] == "Science"

    def test_editor_cannot_edit_foreign_article(self, client, headers, users, make_article):
        article = make_article(author=users["other_editor"])
        response = client.put(f"/articles/{article.id}", json={"title": "Mine now"}, headers=headers["editor"])
        assert response.status_code == 403

    def test_admin_can_edit_any_article(self, client, headers, make_article):
        article = make_article()
        response = client.put(f"/articles/{article.id}", json={"title": "Edited"}, headers=headers["admin"])
        assert response.status_code == 200
        assert response.json()["title"] == "Edited"

    def test_missing_article(self, client, headers):
        assert client.put("/articles/77", json={"title": "x"}, headers=headers["admin"]).status_code == 404


# ============================================================================
# Reading
# ============================================================================

class TestViewArticle:

    def test_each_read_increments_views_once(self, client, make_article, fresh):
        article = make_article(views=5)

        assert client.get(f"/articles/{article.id}").json()["views"] == 6
        assert client.get(f"/articles/{article.id}").json()["views"] == 7
        assert fresh(Article, article.id).views == 7

    def test_missing_article(self, client):
        response = client.get("/articles/12345")
        assert response.status_code == 404
        assert response.json() == {"error": "Article not found"}


class TestTrending:

    def test_engagement_score_and_order(self, client, make_article):
        make_article(title="Quiet", views=10)
        make_article(title="Popular", views=100, likes=2, saves=1)
        make_article(title="Tied, more likes", views=10, likes=3)

        body = client.get("/articles/trending").json()

        titles = [a["title"] for a in body["articles"]]
        assert titles == ["Popular", "Tied, more likes", "Quiet"]
        scores = {a["title"]: a["engagementScore"] for a in body["articles"]}
        assert scores == {"Popular": 100 + 4 + 3, "Tied, more likes": 10 + 6, "Quiet": 10}
        assert body["filters"] == {"days": 7, "categoryId": None}

    def test_window_and_status(self, client, make_article):
        make_article(title="Fresh")
        make_article(title="Stale", created_at=datetime.now(timezone.utc) - timedelta(days=10))
        make_article(title="Draft", status=ArticleStatus.DRAFT)

        titles = [a["title"] for a in client.get("/articles/trending").json()["articles"]]
        assert titles == ["Fresh"]

        titles = [a["title"] for a in client.get("/articles/trending?days=30").json()["articles"]]
        assert set(titles) == {"Fresh", "Stale"}

    def test_pagination(self, client, make_article):
        for views in range(5):
            make_article(title=f"A{views}", views=views)

        body = client.get("/articles/trending?page=2&limit=2").json()
        assert [a["title"] for a in body["articles"]] == ["A2", "A1"]
        assert body["pagination"] == {"total": 5, "pages": 3, "currentPage": 2}


class TestCategoryListing:

    def test_published_only_newest_first(self, client, make_article, category):
        make_article(title="Old", created_at=datetime.now(timezone.utc) - timedelta(days=3))
        make_article(title="New")
        make_article(title="Hidden", status=ArticleStatus.PENDING)

        body = client.get(f"/articles/category/{category.id}").json()
        assert [a["title"] for a in body["articles"]] == ["New", "Old"]
        assert body["pagination"]["total"] == 2


class TestFeed:

    def test_feed_follows_categories(self, client, headers, make_article, category, session):
        other = Category(name="Sports")
        session.add(other)
        session.commit()
        make_article(title="Tech news")
        make_article(title="Match report", category_id=other.id)

        assert client.get("/articles/feed/my", headers=headers["reader"]).json() == []

        client.post(f"/users/categories/{category.id}/follow", headers=headers["reader"])
        titles = [a["title"] for a in client.get("/articles/feed/my", headers=headers["reader"]).json()]
        assert titles == ["Tech news"]

    def test_feed_requires_auth(self, client):
        assert client.get("/articles/feed/my").status_code == 401


# ============================================================================
# Likes and bookmarks
# ============================================================================

class TestLikes:

    def test_like_then_duplicate_fails(self, client, headers, make_article):
        article = make_article()

        first = client.post(f"/articles/{article.id}/like", headers=headers["reader"])
        second = client.post(f"/articles/{article.id}/like", headers=headers["reader"])

        assert first.status_code == 201
        assert second.status_code == 400
        assert "error" in second.json()
        assert client.get(f"/articles/{article.id}").json()["counts"]["likes"] == 1

    def test_unlike(self, client, headers, make_article):
        article = make_article()
        client.post(f"/articles/{article.id}/like", headers=headers["reader"])

        response = client.delete(f"/articles/{article.id}/like", headers=headers["reader"])

        assert response.status_code == 204
        assert response.content == b""

    def test_unlike_without_like_fails(self, client, headers, make_article):
        article = make_article()
        response = client.delete(f"/articles/{article.id}/like", headers=headers["reader"])
        assert response.status_code == 400

    def test_like_missing_article(self, client, headers):
        assert client.post("/articles/999/like", headers=headers["reader"]).status_code == 404

    def test_like_requires_auth(self, client, make_article):
        article = make_article()
        assert client.post(f"/articles/{article.id}/like").status_code == 401


class TestBookmarks:

    def test_save_list_unsave(self, client, headers, make_article):
        article = make_article(title="Read later")

        assert client.post(f"/articles/{article.id}/save", headers=headers["reader"]).status_code == 201
        assert client.post(f"/articles/{article.id}/save", headers=headers["reader"]).status_code == 400

        saved = client.get("/users/saved", headers=headers["reader"]).json()
        assert [s["article"]["title"] for s in saved] == ["Read later"]

        assert client.delete(f"/articles/{article.id}/save", headers=headers["reader"]).status_code == 204
        assert client.get("/users/saved", headers=headers["reader"]).json() == []
        assert client.delete(f"/articles/{article.id}/save", headers=headers["reader"]).status_code == 400
