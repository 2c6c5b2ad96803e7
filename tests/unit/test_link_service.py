import base64
from datetime import datetime, timezone

import pytest
from fastapi import HTTPException

from app.modules.links.schemas import ClickRequest, LinkCreate, LinkUpdate
from app.modules.links.service import LinkService, build_link_response


def test_build_link_response_hides_password_and_resolves_status(make_link, now):
    row = make_link(password="secret", scheduled_at="2099-01-01T00:00:00Z")
    resp = build_link_response(row, now)
    assert resp.is_password_protected is True
    assert "password" not in resp.model_dump()
    assert resp.display_status == "Scheduled"
    assert resp.is_clickable is False
    assert resp.scheduled_at == datetime(2099, 1, 1, tzinfo=timezone.utc)


def test_build_link_response_survives_malformed_timestamps(make_link, now):
    resp = build_link_response(make_link(expires_at="not-a-date"), now)
    assert resp.expires_at is None
    assert resp.display_status == "Active"


def test_list_links_orders_by_order(make_supabase, make_link, now):
    supabase = make_supabase([make_link(id="a", order=0), make_link(id="b", order=1, is_active=False)])
    links = LinkService(supabase).list_links("user-1", now)

    assert [l.id for l in links] == ["a", "b"]
    assert [l.display_status for l in links] == ["Active", "Inactive"]
    supabase.table.assert_called_with("links")
    supabase.queries[0].order.assert_called_once_with("order")


def test_create_link_appends_after_highest_order(make_supabase, make_link):
    supabase = make_supabase([{"order": 4}], [make_link(order=5)])
    scheduled = datetime(2099, 1, 1, tzinfo=timezone.utc)

    resp = LinkService(supabase).create_link(
        LinkCreate(title="My site", url="example.com", scheduled_at=scheduled, password=""),
        "user-1",
    )

    inserted = supabase.queries[1].insert.call_args.args[0]
    assert inserted["order"] == 5
    assert inserted["user_id"] == "user-1"
    assert inserted["scheduled_at"] == scheduled.isoformat()
    assert inserted["expires_at"] is None
    assert inserted["password"] is None
    assert resp.order == 5


def test_create_first_link_gets_order_zero(make_supabase, make_link):
    supabase = make_supabase([], [make_link()])
    LinkService(supabase).create_link(LinkCreate(title="t", url="u"), "user-1")
    assert supabase.queries[1].insert.call_args.args[0]["order"] == 0


def test_update_link_can_clear_schedule(make_supabase, make_link):
    existing = make_link(scheduled_at="2099-01-01T00:00:00Z")
    supabase = make_supabase(existing, [make_link(title="New")])

    resp = LinkService(supabase).update_link(
        "link-1", LinkUpdate(title="New", scheduled_at=None), "user-1"
    )

    update_data = supabase.queries[1].update.call_args.args[0]
    assert update_data["title"] == "New"
    assert update_data["scheduled_at"] is None
    assert "expires_at" not in update_data
    assert "updated_at" in update_data
    assert resp.title == "New"


def test_update_missing_link_is_404(make_supabase):
    supabase = make_supabase(None)
    with pytest.raises(HTTPException) as exc:
        LinkService(supabase).update_link("nope", LinkUpdate(title="x"), "user-1")
    assert exc.value.status_code == 404


def test_delete_link_scoped_to_owner(make_supabase, make_link):
    supabase = make_supabase([make_link()])
    assert LinkService(supabase).delete_link("link-1", "user-1") is True
    supabase.queries[0].eq.assert_any_call("user_id", "user-1")


def test_delete_missing_link_is_404(make_supabase):
    supabase = make_supabase([])
    with pytest.raises(HTTPException) as exc:
        LinkService(supabase).delete_link("link-1", "user-1")
    assert exc.value.status_code == 404


def test_reorder_sets_order_to_index(make_supabase, make_link):
    supabase = make_supabase([], [], [make_link(id="b", order=0), make_link(id="a", order=1)])

    links = LinkService(supabase).reorder_links("user-1", ["b", "a"])

    assert supabase.queries[0].update.call_args.args[0] == {"order": 0}
    supabase.queries[0].eq.assert_any_call("id", "b")
    assert supabase.queries[1].update.call_args.args[0] == {"order": 1}
    supabase.queries[1].eq.assert_any_call("id", "a")
    assert [l.id for l in links] == ["b", "a"]


def test_check_password_requires_password(make_supabase):
    with pytest.raises(HTTPException) as exc:
        LinkService(make_supabase()).check_password("link-1", "")
    assert exc.value.status_code == 400


def test_check_password_rejects_links_that_are_not_live(make_supabase, make_link, now):
    supabase = make_supabase(make_link(password="pw", expires_at="2020-01-01T00:00:00Z"))
    with pytest.raises(HTTPException) as exc:
        LinkService(supabase).check_password("link-1", "pw", now)
    assert exc.value.status_code == 403


def test_check_password_rejects_inactive_links(make_supabase, make_link, now):
    supabase = make_supabase(make_link(password="pw", is_active=False))
    with pytest.raises(HTTPException) as exc:
        LinkService(supabase).check_password("link-1", "pw", now)
    assert exc.value.status_code == 403


def test_check_password_wrong_password(make_supabase, make_link, now):
    supabase = make_supabase(make_link(password="pw"))
    with pytest.raises(HTTPException) as exc:
        LinkService(supabase).check_password("link-1", "nope", now)
    assert exc.value.status_code == 401


def test_check_password_success(make_supabase, make_link, now):
    supabase = make_supabase(make_link(password="pw"))
    assert LinkService(supabase).check_password("link-1", "pw", now).success is True


def test_record_click_normalizes_url_and_counts(make_supabase, make_link, now):
    supabase = make_supabase(make_link(url="example.com"), [{"id": "analytics-1"}])

    resp = LinkService(supabase).record_click(
        "link-1", ClickRequest(user_agent="pytest"), ip_address="127.0.0.1", now=now
    )

    assert resp.url == "https://example.com"
    supabase.rpc.assert_called_once_with("increment_link_clicks", {"link_id": "link-1"})
    analytics = supabase.queries[1].insert.call_args.args[0]
    assert analytics["user_id"] == "user-1"
    assert analytics["ip_address"] == "127.0.0.1"
    assert analytics["user_agent"] == "pytest"


def test_record_click_on_inactive_link_is_allowed(make_supabase, make_link, now):
    supabase = make_supabase(make_link(is_active=False), [{}])
    assert LinkService(supabase).record_click("link-1", ClickRequest(), now=now).success is True


def test_record_click_on_scheduled_link_is_forbidden(make_supabase, make_link, now):
    supabase = make_supabase(make_link(scheduled_at="2099-01-01T00:00:00Z"))
    with pytest.raises(HTTPException) as exc:
        LinkService(supabase).record_click("link-1", ClickRequest(), now=now)
    assert exc.value.status_code == 403
    supabase.rpc.assert_not_called()


def test_link_qr_encodes_normalized_destination(make_supabase, make_link):
    supabase = make_supabase(make_link(url="example.com/shop", title="Shop"))

    resp = LinkService(supabase).get_link_qr("link-1", "user-1")

    assert resp.url == "https://example.com/shop"
    assert resp.link_title == "Shop"
    assert resp.qr_code.startswith("data:image/png;base64,")
    png = base64.b64decode(resp.qr_code.split(",", 1)[1])
    assert png.startswith(b"\x89PNG\r\n\x1a\n")
    supabase.queries[0].eq.assert_any_call("user_id", "user-1")


def test_link_qr_for_foreign_link_is_404(make_supabase):
    with pytest.raises(HTTPException) as exc:
        LinkService(make_supabase(None)).get_link_qr("link-1", "user-2")
    assert exc.value.status_code == 404
