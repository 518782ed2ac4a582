from __future__ import annotations

import uuid

API = "/api/v1"


def _video(client, headers, title) -> str:
    r = client.post(
        f"{API}/videos",
        data={"title": title},
        files={"videoFile": ("clip.mp4", b"video", "video/mp4")},
        headers=headers,
    )
    return r.json()["data"]["id"]


def _playlist(client, headers, name="Favourites", description="best of") -> str:
    r = client.post(f"{API}/playlist", json={"name": name, "description": description}, headers=headers)
    assert r.status_code == 200
    return r.json()["data"]["id"]


def test_create_playlist(client, as_user, users) -> None:
    r = client.post(f"{API}/playlist", json={"name": "Chill", "description": "evening"}, headers=as_user("alice"))

    assert r.status_code == 200
    playlist = r.json()["data"]
    assert playlist["name"] == "Chill"
    assert playlist["owner"] == str(users["alice"])
    assert playlist["videos"] == []

    r = client.post(f"{API}/playlist", json={"description": "nameless"}, headers=as_user("alice"))
    assert r.status_code == 400
    assert r.json()["message"] == "name is required"


def test_add_and_remove_videos_keeps_order(client, as_user) -> None:
    a = _video(client, as_user("bob"), "A")
    b = _video(client, as_user("bob"), "B")
    c = _video(client, as_user("carol"), "C")
    playlist_id = _playlist(client, as_user("alice"))

    for video_id in (c, a, b):
        r = client.patch(f"{API}/playlist/add/{video_id}/{playlist_id}", headers=as_user("alice"))
        assert r.status_code == 200
    assert r.json()["data"]["videos"] == [c, a, b]

    r = client.patch(f"{API}/playlist/add/{a}/{playlist_id}", headers=as_user("alice"))
    assert r.status_code == 400
    assert r.json()["message"] == "Video already exists in the playlist"

    r = client.patch(f"{API}/playlist/remove/{a}/{playlist_id}", headers=as_user("alice"))
    assert r.status_code == 200
    assert r.json()["data"]["videos"] == [c, b]

    r = client.patch(f"{API}/playlist/remove/{a}/{playlist_id}", headers=as_user("alice"))
    assert r.status_code == 404
    assert r.json()["message"] == "Video is not in the playlist"

    detail = client.get(f"{API}/playlist/{playlist_id}", headers=as_user("bob")).json()["data"]
    assert [v["id"] for v in detail["videos"]] == [c, b]
    assert detail["videos"][0]["owner"]["username"] == "carol"
    assert detail["owner"]["username"] == "alice"


def test_only_owner_can_change_playlist(client, as_user) -> None:
    video_id = _video(client, as_user("bob"), "A")
    playlist_id = _playlist(client, as_user("alice"))

    assert client.patch(f"{API}/playlist/add/{video_id}/{playlist_id}", headers=as_user("bob")).status_code == 403
    r = client.patch(
        f"{API}/playlist/{playlist_id}", json={"name": "x", "description": "y"}, headers=as_user("bob"),
    )
    assert r.status_code == 403
    assert client.delete(f"{API}/playlist/{playlist_id}", headers=as_user("bob")).status_code == 403


def test_add_missing_video_or_playlist(client, as_user) -> None:
    video_id = _video(client, as_user("bob"), "A")
    playlist_id = _playlist(client, as_user("alice"))

    r = client.patch(f"{API}/playlist/add/{uuid.uuid4()}/{playlist_id}", headers=as_user("alice"))
    assert r.status_code == 404
    assert r.json()["message"] == "Video not found"

    r = client.patch(f"{API}/playlist/add/{video_id}/{uuid.uuid4()}", headers=as_user("alice"))
    assert r.status_code == 404
    assert r.json()["message"] == "Playlist not found"


def test_update_playlist_requires_both_fields(client, as_user) -> None:
    playlist_id = _playlist(client, as_user("alice"))

    r = client.patch(f"{API}/playlist/{playlist_id}", json={"name": "Only name"}, headers=as_user("alice"))
    assert r.status_code == 400
    assert r.json()["message"] == "name and description are required"

    r = client.patch(
        f"{API}/playlist/{playlist_id}", json={"name": "Renamed", "description": "fresh"}, headers=as_user("alice"),
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert (data["name"], data["description"]) == ("Renamed", "fresh")


def test_user_playlists_and_delete(client, as_user, users) -> None:
    video_id = _video(client, as_user("bob"), "A")
    first = _playlist(client, as_user("alice"), name="One")
    _playlist(client, as_user("alice"), name="Two")
    _playlist(client, as_user("bob"), name="Bob's")
    client.patch(f"{API}/playlist/add/{video_id}/{first}", headers=as_user("alice"))

    r = client.get(f"{API}/playlist/user/{users['alice']}", headers=as_user("carol"))

    assert r.status_code == 200
    page = r.json()["data"]
    assert page["totalItems"] == 2
    by_name = {p["name"]: p for p in page["items"]}
    assert [v["id"] for v in by_name["One"]["videos"]] == [video_id]
    assert by_name["Two"]["videos"] == []

    assert client.get(f"{API}/playlist/user/{uuid.uuid4()}", headers=as_user("carol")).status_code == 404

    r = client.delete(f"{API}/playlist/{first}", headers=as_user("alice"))
    assert r.status_code == 200
    assert client.get(f"{API}/playlist/{first}", headers=as_user("alice")).status_code == 404


def test_deleted_video_leaves_playlists(client, as_user) -> None:
    video_id = _video(client, as_user("bob"), "Gone soon")
    playlist_id = _playlist(client, as_user("alice"))
    client.patch(f"{API}/playlist/add/{video_id}/{playlist_id}", headers=as_user("alice"))

    assert client.delete(f"{API}/videos/{video_id}", headers=as_user("bob")).status_code == 200

    detail = client.get(f"{API}/playlist/{playlist_id}", headers=as_user("alice")).json()["data"]
    assert detail["videos"] == []


def test_unpublished_videos_are_hidden_in_playlists(client, as_user, users) -> None:
    public = _video(client, as_user("bob"), "Public")
    private = _video(client, as_user("bob"), "Private")
    playlist_id = _playlist(client, as_user("alice"))
    for video_id in (public, private):
        client.patch(f"{API}/playlist/add/{video_id}/{playlist_id}", headers=as_user("alice"))
    client.patch(f"{API}/videos/toggle/publish/{private}", headers=as_user("bob"))

    detail = client.get(f"{API}/playlist/{playlist_id}", headers=as_user("alice")).json()["data"]
    assert [v["id"] for v in detail["videos"]] == [public]
    listed = client.get(f"{API}/playlist/user/{users['alice']}", headers=as_user("carol")).json()["data"]
    assert [v["id"] for v in listed["items"][0]["videos"]] == [public]

    # the video's owner still sees it in someone else's playlist
    detail = client.get(f"{API}/playlist/{playlist_id}", headers=as_user("bob")).json()["data"]
    assert [v["id"] for v in detail["videos"]] == [public, private]


def test_cannot_add_someone_elses_unpublished_video(client, as_user) -> None:
    video_id = _video(client, as_user("bob"), "Draft")
    client.patch(f"{API}/videos/toggle/publish/{video_id}", headers=as_user("bob"))
    alice_list = _playlist(client, as_user("alice"))
    bob_list = _playlist(client, as_user("bob"))

    r = client.patch(f"{API}/playlist/add/{video_id}/{alice_list}", headers=as_user("alice"))
    assert r.status_code == 404
    assert r.json()["message"] == "Video not found"

    r = client.patch(f"{API}/playlist/add/{video_id}/{bob_list}", headers=as_user("bob"))
    assert r.status_code == 200
