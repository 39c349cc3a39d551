"""Tests for the post service: creation, replies, edits, deletion and bookmarks."""

import pytest
from sqlalchemy import func, select

from pulse_stage.core.errors import ForbiddenError, NotFoundError
from pulse_stage.models import NotificationGroup, Post, PostBookmark, PostTip, PostVote
from pulse_stage.schemas.post import PostCreate, PostUpdate
from pulse_stage.services.post_service import PostService, to_post_response
from pulse_stage.services.votes import VoteLedger


@pytest.fixture()
def service(db_session, broadcaster, media_store):
    return PostService(db_session, broadcaster, media_store)


def _count(db_session, model) -> int:
    return db_session.execute(select(func.count()).select_from(model)).scalar()


def test_create_post_initialises_counters(service, test_user):
    post = service.create_post(
        test_user.id,
        PostCreate(title="Fish &amp; chips", text="<p>hi</p>", images=["https://cdn.test/a.png"]),
    )

    assert post.id is not None
    assert post.title == "Fish & chips"
    assert post.total_votes == 0
    assert post.reputation == pytest.approx(1.0)
    assert post.last_upvotes_weight == 0
    assert post.last_downvotes_weight == 0
    assert post.replied_to_id is None
    assert post.images == ["https://cdn.test/a.png"]


def test_create_post_broadcasts_new_post(service, broadcaster, test_user):
    queue = broadcaster.subscribe()

    post = service.create_post(test_user.id, PostCreate(title="Hello"))

    message = queue.get_nowait()
    assert message["event"] == "newPost"
    assert message["payload"]["postId"] == post.id
    assert message["payload"]["title"] == "Hello"
    assert message["payload"]["user"]["id"] == test_user.id


def test_create_post_survives_broadcast_failure(service, broadcaster, test_user, mocker):
    mocker.patch.object(broadcaster, "emit", side_effect=RuntimeError("socket closed"))

    post = service.create_post(test_user.id, PostCreate(title="Hello"))

    assert post.id is not None


def test_create_post_with_unknown_preview(service, test_user):
    with pytest.raises(NotFoundError, match="Preview not found"):
        service.create_post(test_user.id, PostCreate(title="x", preview_id=42))


def test_reply_notifies_parent_author(db_session, service, test_post, test_user, other_user):
    first = service.create_reply(test_post.id, other_user.id, PostCreate(text="nice"))
    second = service.create_reply(test_post.id, other_user.id, PostCreate(text="really"))

    assert first.replied_to_id == test_post.id
    expected = sorted([first.id, second.id])
    db_session.expire_all()
    assert sorted(db_session.get(Post, test_post.id).reply_ids) == expected
    group = db_session.execute(
        select(NotificationGroup).where(NotificationGroup.type == "comment")
    ).scalar_one()
    assert group.user_id == test_user.id
    assert group.count == 2


def test_reply_to_own_post_does_not_notify(db_session, service, test_post, test_user):
    service.create_reply(test_post.id, test_user.id, PostCreate(text="bump"))

    assert _count(db_session, NotificationGroup) == 0


def test_reply_to_missing_post(service, test_user):
    with pytest.raises(NotFoundError, match="Post not found"):
        service.create_reply(999, test_user.id, PostCreate(text="hello?"))


def test_edit_updates_only_given_fields(service, make_post, test_user):
    post = make_post(test_user, title="Old", text="<p>keep</p>")

    edited = service.edit_post(post.id, test_user.id, PostUpdate(title="New"))

    assert edited.title == "New"
    assert edited.text == "<p>keep</p>"
    assert edited.updated_at is not None


def test_edit_by_other_user_is_forbidden(service, test_post, other_user):
    with pytest.raises(ForbiddenError):
        service.edit_post(test_post.id, other_user.id, PostUpdate(title="mine now"))


def test_edit_cleans_up_dropped_images(service, media_store, make_post, test_user):
    post = make_post(
        test_user,
        text='<p><img class="x" src="https://cdn.test/medias/inline.png"></p>',
        images=["https://cdn.test/medias/a.png", "https://cdn.test/medias/b.png"],
    )

    service.edit_post(
        post.id,
        test_user.id,
        PostUpdate(text="<p>no images</p>", images=["https://cdn.test/medias/b.png"]),
    )

    assert sorted(media_store.deleted) == ["medias/a.png", "medias/inline.png"]


def test_delete_cascades_through_reply_tree(
    db_session, service, media_store, make_post, test_user, other_user, admin_user
):
    root = make_post(test_user, minutes=1, images=["https://cdn.test/medias/root.png"])
    child = make_post(other_user, minutes=2, parent=root)
    grandchild = make_post(test_user, minutes=3, parent=child, text='<img src="https://cdn.test/g.jpg">')
    unrelated = make_post(other_user, minutes=4)
    VoteLedger(db_session).upvote(child.id, test_user.id)
    VoteLedger(db_session).upvote(unrelated.id, test_user.id)
    service.toggle_bookmark(grandchild.id, other_user.id)
    ids = [root.id, child.id, grandchild.id]
    unrelated_id = unrelated.id

    deleted = service.delete_post(root.id, test_user.id)

    assert sorted(deleted) == sorted(ids)
    db_session.expire_all()
    for post_id in ids:
        assert db_session.get(Post, post_id) is None
    assert db_session.get(Post, unrelated_id) is not None
    assert _count(db_session, PostVote) == 1
    assert _count(db_session, PostTip) == 1
    assert _count(db_session, PostBookmark) == 0
    assert sorted(media_store.deleted) == ["medias/g.jpg", "medias/root.png"]


def test_delete_by_other_user_is_forbidden(db_session, service, test_post, other_user):
    with pytest.raises(ForbiddenError):
        service.delete_post(test_post.id, other_user.id)

    assert db_session.get(Post, test_post.id) is not None


def test_media_cleanup_failure_does_not_block_delete(db_session, service, media_store, make_post, test_user, mocker):
    post = make_post(test_user, images=["https://cdn.test/medias/a.png"])
    post_id = post.id
    mocker.patch.object(media_store, "delete", side_effect=OSError("bucket unavailable"))

    service.delete_post(post_id, test_user.id)

    db_session.expire_all()
    assert db_session.get(Post, post_id) is None


def test_toggle_bookmark(service, test_post, other_user):
    assert service.toggle_bookmark(test_post.id, other_user.id) is True
    assert to_post_response(service.get_post(test_post.id)).book_marks == [other_user.id]

    assert service.toggle_bookmark(test_post.id, other_user.id) is False
    assert to_post_response(service.get_post(test_post.id)).book_marks == []


def test_to_post_response_uses_persisted_field_names(service, test_post, test_user):
    payload = to_post_response(service.get_post(test_post.id)).model_dump(by_alias=True)

    assert payload["userId"] == test_user.id
    assert payload["totalVotes"] == 0
    assert payload["lastUpvotesWeight"] == 0
    assert payload["bookMarks"] == []
    assert payload["repliedTo"] is None
    assert payload["author"]["username"] == "alice"
