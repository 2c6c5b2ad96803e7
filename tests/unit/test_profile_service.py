import pytest
from fastapi import HTTPException

from app.modules.profiles.service import ProfileService

PROFILE = {
    "id": "user-1",
    "username": "alice",
    "display_name": "Alice",
    "bio": "hi",
    "profile_image": None,
    "theme": "default",
}


def test_public_profile_lists_active_links_with_badges(make_supabase, make_link, now):
    supabase = make_supabase(PROFILE, [
        make_link(id="plain"),
        make_link(id="locked", password="pw", order=1),
        make_link(id="soon", scheduled_at="2099-01-01T00:00:00Z", order=2),
        make_link(id="gone", expires_at="2020-01-01T00:00:00Z", order=3),
    ])

    resp = ProfileService(supabase).get_public_profile("alice", now)

    assert resp.user.username == "alice"
    links = {l.id: l for l in resp.links}
    assert links["plain"].badge is None and links["plain"].is_clickable
    assert links["locked"].badge == "Password Protected" and links["locked"].is_clickable
    assert links["soon"].badge == "Scheduled for 1 Jan 2099, 00:00 UTC"
    assert links["soon"].is_clickable is False
    assert links["gone"].badge == "Expired" and links["gone"].is_clickable is False
    supabase.queries[1].eq.assert_any_call("is_active", True)


def test_public_profile_unknown_user_is_404(make_supabase, now):
    with pytest.raises(HTTPException) as exc:
        ProfileService(make_supabase(None)).get_public_profile("ghost", now)
    assert exc.value.status_code == 404
