"""Tests for preview source-post attribution."""

from pulse_stage.models import Preview
from pulse_stage.schemas.post import PostCreate, PostUpdate
from pulse_stage.services.attribution import oldest_post_using_preview, reattribute
from pulse_stage.services.post_service import PostService


def _source_of(db_session, preview_id):
    db_session.expire_all()
    return db_session.get(Preview, preview_id).source_post_id


def _service(db_session, broadcaster, media_store):
    return PostService(db_session, broadcaster, media_store)


def test_deleting_posts_hands_attribution_down(
    db_session, make_post, make_preview, test_user, broadcaster, media_store
):
    preview = make_preview("https://example.com/x")
    post_a = make_post(test_user, minutes=1, preview=preview)
    post_b = make_post(test_user, minutes=2, preview=preview)
    post_c = make_post(test_user, minutes=3, preview=preview)
    for post in (post_a, post_b, post_c):
        reattribute(db_session, preview.id, post.id, set_only=True)
    db_session.commit()
    assert _source_of(db_session, preview.id) == post_a.id

    service = _service(db_session, broadcaster, media_store)
    ids = {"a": post_a.id, "b": post_b.id, "c": post_c.id}

    service.delete_post(ids["a"], test_user.id)
    assert _source_of(db_session, preview.id) == ids["b"]

    service.delete_post(ids["b"], test_user.id)
    assert _source_of(db_session, preview.id) == ids["c"]

    service.delete_post(ids["c"], test_user.id)
    assert _source_of(db_session, preview.id) is None


def test_removing_preview_in_edit_reattributes(
    db_session, make_post, make_preview, test_user, broadcaster, media_store
):
    preview = make_preview("https://example.com/x")
    post_a = make_post(test_user, minutes=1, preview=preview)
    post_b = make_post(test_user, minutes=2, preview=preview)
    reattribute(db_session, preview.id, post_a.id, set_only=True)
    db_session.commit()

    _service(db_session, broadcaster, media_store).edit_post(
        post_a.id, test_user.id, PostUpdate(preview_id=None)
    )

    assert _source_of(db_session, preview.id) == post_b.id


def test_switching_preview_updates_both(
    db_session, make_post, make_preview, test_user, broadcaster, media_store
):
    old = make_preview("https://example.com/old")
    new = make_preview("https://example.com/new")
    post = make_post(test_user, minutes=1, preview=old)
    reattribute(db_session, old.id, post.id, set_only=True)
    db_session.commit()

    _service(db_session, broadcaster, media_store).edit_post(
        post.id, test_user.id, PostUpdate(preview_id=new.id)
    )

    assert _source_of(db_session, old.id) is None
    assert _source_of(db_session, new.id) == post.id


def test_new_post_claims_only_unattributed_preview(
    db_session, make_preview, test_user, other_user, broadcaster, media_store
):
    preview = make_preview("https://example.com/x")
    service = _service(db_session, broadcaster, media_store)

    first = service.create_post(test_user.id, PostCreate(title="first", preview_id=preview.id))
    second = service.create_post(other_user.id, PostCreate(title="second", preview_id=preview.id))

    assert _source_of(db_session, preview.id) == first.id
    assert second.preview_id == preview.id


def test_set_only_leaves_existing_source(db_session, make_post, make_preview, test_user):
    preview = make_preview("https://example.com/x")
    older = make_post(test_user, minutes=1, preview=preview)
    newer = make_post(test_user, minutes=2, preview=preview)

    reattribute(db_session, preview.id, newer.id, set_only=True)
    reattribute(db_session, preview.id, older.id, set_only=True)
    db_session.commit()

    assert _source_of(db_session, preview.id) == newer.id


def test_recompute_picks_oldest_remaining(db_session, make_post, make_preview, test_user):
    preview = make_preview("https://example.com/x")
    make_post(test_user, minutes=5, preview=preview)
    oldest = make_post(test_user, minutes=1, preview=preview)
    middle = make_post(test_user, minutes=3, preview=preview)

    assert oldest_post_using_preview(db_session, preview.id, None) == oldest.id
    assert oldest_post_using_preview(db_session, preview.id, oldest.id) == middle.id


def test_reattribute_missing_preview_is_ignored(db_session, test_post):
    assert reattribute(db_session, None, test_post.id) is None
    assert reattribute(db_session, 999, test_post.id) is None
