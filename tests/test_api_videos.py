from __future__ import annotations

import uuid

API = "/api/v1"


def _publish(client, headers, title="My video", description="about it", thumbnail=True):
    files = {"videoFile": ("clip.mp4", b"\x00\x01video-bytes", "video/mp4")}
    if thumbnail:
        files["thumbnail"] = ("thumb.png", b"png-bytes", "image/png")
    return client.post(
        f"{API}/videos",
        data={"title": title, "description": description},
        files=files,
        headers=headers,
    )


def test_requests_without_actor_are_unauthorized(client) -> None:
    r = client.get(f"{API}/videos")

    assert r.status_code == 401
    body = r.json()
    assert body == {"statusCode": 401, "message": "Unauthorized request", "success": False, "errors": []}


def test_unknown_actor_is_unauthorized(client) -> None:
    r = client.get(f"{API}/videos", headers={"X-User-Id": str(uuid.uuid4())})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid actor identity"


def test_publish_uploads_media_and_returns_video(client, as_user, users, uploader) -> None:
    r = _publish(client, as_user("alice"))

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["statusCode"] == 200
    assert body["message"] == "Video published successfully"
    video = body["data"]
    assert video["title"] == "My video"
    assert video["owner"] == str(users["alice"])
    assert video["isPublished"] is True
    assert video["videoFile"].startswith("https://media.test/videos/")
    assert video["thumbnail"].startswith("https://media.test/thumbnails/")
    assert [folder for folder, _, _ in uploader.uploads] == ["videos", "thumbnails"]
    assert uploader.uploads[0][2] == b"\x00\x01video-bytes"


def test_publish_requires_title_and_file(client, as_user, uploader) -> None:
    r = _publish(client, as_user("alice"), title="  ")
    assert r.status_code == 400
    assert r.json()["message"] == "title is required"

    r = client.post(f"{API}/videos", data={"title": "No file"}, headers=as_user("alice"))
    assert r.status_code == 400
    assert r.json()["message"] == "Video file is required"
    assert uploader.uploads == []


def test_failed_upload_is_reported(client, as_user, uploader) -> None:
    uploader.fail = True
    r = _publish(client, as_user("alice"), thumbnail=False)

    assert r.status_code == 400
    assert r.json()["message"] == "Error while uploading video file"


def test_list_videos_paginates_and_nests_owner(client, as_user) -> None:
    for i in range(3):
        assert _publish(client, as_user("alice"), title=f"Alice {i}").status_code == 200
    assert _publish(client, as_user("bob"), title="Bob only").status_code == 200

    r = client.get(f"{API}/videos", params={"page": 1, "limit": 2}, headers=as_user("carol"))

    assert r.status_code == 200
    page = r.json()["data"]
    assert page["totalItems"] == 4
    assert page["totalPages"] == 2
    assert page["currentPage"] == 1
    assert page["pageSize"] == 2
    assert len(page["items"]) == 2
    owner = page["items"][0]["owner"]
    assert set(owner) == {"id", "username", "fullName", "avatar"}


def test_list_videos_filters_by_user_and_query(client, as_user, users) -> None:
    _publish(client, as_user("alice"), title="Cooking pasta")
    _publish(client, as_user("alice"), title="Gardening")
    _publish(client, as_user("bob"), title="Cooking rice")

    r = client.get(
        f"{API}/videos",
        params={"userId": str(users["alice"]), "query": "cook"},
        headers=as_user("carol"),
    )

    items = r.json()["data"]["items"]
    assert [item["title"] for item in items] == ["Cooking pasta"]


def test_list_videos_sorting(client, as_user) -> None:
    for title in ("b", "c", "a"):
        _publish(client, as_user("alice"), title=title)

    r = client.get(f"{API}/videos", params={"sortBy": "title", "sortType": "asc"}, headers=as_user("bob"))
    assert [item["title"] for item in r.json()["data"]["items"]] == ["a", "b", "c"]

    r = client.get(f"{API}/videos", params={"sortBy": "secret"}, headers=as_user("bob"))
    assert r.status_code == 400

    r = client.get(f"{API}/videos", params={"sortType": "up"}, headers=as_user("bob"))
    assert r.status_code == 400


def test_page_past_end_is_empty_not_error(client, as_user) -> None:
    _publish(client, as_user("alice"))

    r = client.get(f"{API}/videos", params={"page": 5}, headers=as_user("alice"))

    assert r.status_code == 200
    page = r.json()["data"]
    assert page["items"] == []
    assert page["totalItems"] == 1
    assert page["totalPages"] == 1


def test_invalid_page_parameters_are_rejected(client, as_user) -> None:
    r = client.get(f"{API}/videos", params={"page": 0}, headers=as_user("alice"))
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["errors"]


def test_get_video_includes_like_state(client, as_user) -> None:
    video_id = _publish(client, as_user("alice")).json()["data"]["id"]
    client.post(f"{API}/likes/toggle/v/{video_id}", headers=as_user("bob"))

    r = client.get(f"{API}/videos/{video_id}", headers=as_user("bob"))

    assert r.status_code == 200
    video = r.json()["data"]
    assert video["likes"] == 1
    assert video["isLiked"] is True
    assert video["owner"]["username"] == "alice"

    other = client.get(f"{API}/videos/{video_id}", headers=as_user("carol")).json()["data"]
    assert other["likes"] == 1
    assert other["isLiked"] is False


def test_get_video_errors(client, as_user) -> None:
    r = client.get(f"{API}/videos/not-a-uuid", headers=as_user("alice"))
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid video id format"

    r = client.get(f"{API}/videos/{uuid.uuid4()}", headers=as_user("alice"))
    assert r.status_code == 404
    assert r.json()["message"] == "Video not found"


def test_unpublished_video_is_hidden_from_others(client, as_user, users) -> None:
    video_id = _publish(client, as_user("alice")).json()["data"]["id"]

    r = client.patch(f"{API}/videos/toggle/publish/{video_id}", headers=as_user("alice"))
    assert r.status_code == 200
    assert r.json()["data"]["isPublished"] is False
    assert r.json()["message"] == "Video unpublished"

    assert client.get(f"{API}/videos/{video_id}", headers=as_user("bob")).status_code == 404
    assert client.get(f"{API}/videos/{video_id}", headers=as_user("alice")).status_code == 200

    listed = client.get(f"{API}/videos", headers=as_user("bob")).json()["data"]
    assert listed["totalItems"] == 0
    own = client.get(f"{API}/videos", params={"userId": str(users["alice"])}, headers=as_user("alice"))
    assert own.json()["data"]["totalItems"] == 1

    r = client.patch(f"{API}/videos/toggle/publish/{video_id}", headers=as_user("alice"))
    assert r.json()["data"]["isPublished"] is True


def test_update_video_details(client, as_user, uploader) -> None:
    video_id = _publish(client, as_user("alice"), thumbnail=False).json()["data"]["id"]

    r = client.patch(
        f"{API}/videos/{video_id}",
        data={"title": "Renamed", "description": "new"},
        files={"thumbnail": ("t.jpg", b"jpg", "image/jpeg")},
        headers=as_user("alice"),
    )

    assert r.status_code == 200
    video = r.json()["data"]
    assert video["title"] == "Renamed"
    assert video["description"] == "new"
    assert video["thumbnail"].startswith("https://media.test/thumbnails/")


def test_only_owner_can_modify_video(client, as_user) -> None:
    video_id = _publish(client, as_user("alice")).json()["data"]["id"]

    r = client.patch(f"{API}/videos/{video_id}", data={"title": "Mine now"}, headers=as_user("bob"))
    assert r.status_code == 403

    assert client.delete(f"{API}/videos/{video_id}", headers=as_user("bob")).status_code == 403
    assert client.patch(f"{API}/videos/toggle/publish/{video_id}", headers=as_user("bob")).status_code == 403


def test_delete_video_cascades(client, as_user, users) -> None:
    video_id = _publish(client, as_user("alice")).json()["data"]["id"]
    comment_id = client.post(
        f"{API}/comments/{video_id}", json={"content": "first"}, headers=as_user("bob"),
    ).json()["data"]["id"]
    client.post(f"{API}/likes/toggle/v/{video_id}", headers=as_user("bob"))
    client.post(f"{API}/likes/toggle/c/{comment_id}", headers=as_user("carol"))

    r = client.delete(f"{API}/videos/{video_id}", headers=as_user("alice"))

    assert r.status_code == 200
    assert r.json()["message"] == "Video deleted successfully"
    assert client.get(f"{API}/videos/{video_id}", headers=as_user("alice")).status_code == 404
    liked = client.get(f"{API}/likes/videos", headers=as_user("bob")).json()["data"]
    assert liked["totalItems"] == 0
    # the comment went with the video, so liking it again finds nothing
    r = client.post(f"{API}/likes/toggle/c/{comment_id}", headers=as_user("carol"))
    assert r.status_code == 404


def test_health_and_root(client) -> None:
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["name"] == "VidHub"


def test_non_owner_update_uploads_nothing(client, as_user, uploader) -> None:
    video_id = _publish(client, as_user("alice"), thumbnail=False).json()["data"]["id"]
    uploader.uploads.clear()

    r = client.patch(
        f"{API}/videos/{video_id}",
        data={"title": "Hijacked"},
        files={"thumbnail": ("t.jpg", b"jpg", "image/jpeg")},
        headers=as_user("bob"),
    )

    assert r.status_code == 403
    assert uploader.uploads == []


def test_update_rejects_blank_title_before_uploading(client, as_user, uploader) -> None:
    video_id = _publish(client, as_user("alice"), thumbnail=False).json()["data"]["id"]
    uploader.uploads.clear()

    r = client.patch(
        f"{API}/videos/{video_id}",
        data={"title": "   "},
        files={"thumbnail": ("t.jpg", b"jpg", "image/jpeg")},
        headers=as_user("alice"),
    )

    assert r.status_code == 400
    assert r.json()["message"] == "title is required"
    assert uploader.uploads == []


def test_replacing_thumbnail_discards_the_old_one(client, as_user, uploader) -> None:
    published = _publish(client, as_user("alice")).json()["data"]

    r = client.patch(
        f"{API}/videos/{published['id']}",
        files={"thumbnail": ("new.jpg", b"jpg", "image/jpeg")},
        headers=as_user("alice"),
    )

    assert r.status_code == 200
    assert r.json()["data"]["thumbnail"] != published["thumbnail"]
    assert uploader.discarded == [published["thumbnail"]]


def test_failed_thumbnail_upload_discards_video_file(client, as_user, users, uploader) -> None:
    uploader.failing_folders.add("thumbnails")

    r = _publish(client, as_user("alice"))

    assert r.status_code == 400
    assert r.json()["message"] == "Error while uploading thumbnail"
    assert [folder for folder, _, _ in uploader.uploads] == ["videos", "thumbnails"]
    (discarded,) = uploader.discarded
    assert discarded.startswith("https://media.test/videos/")
    own = client.get(f"{API}/videos", params={"userId": str(users["alice"])}, headers=as_user("alice"))
    assert own.json()["data"]["totalItems"] == 0
