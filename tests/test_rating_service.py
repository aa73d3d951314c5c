"""
Testes do Envio de Avaliações
=============================
Upsert atômico, comentário, validação e remoção da própria avaliação
"""

import threading

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from src.api.services.rating_service import RatingService
from src.core import models
from src.core.exceptions import NotFoundError, ValidationError
from src.core.utils.enums import UserRole


# ═══════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════

@pytest.fixture
def rating_service(db):
    return RatingService(db)


@pytest.fixture
def store(make_user, make_store):
    return make_store(make_user(role=UserRole.STORE_OWNER), name="Cafe A")


def _ratings_for(db, user, store):
    db.expire_all()
    return db.query(models.Rating).filter_by(user_id=user.id, store_id=store.id).all()


# ═══════════════════════════════════════════════════════════
# UPSERT
# ═══════════════════════════════════════════════════════════

class TestSubmitRating:

    def test_first_submission_creates(self, db, rating_service, normal_user, store):
        created, rating = rating_service.submit_rating(normal_user.id, store.id, 5, "Great")

        assert created is True
        assert rating.rating == 5
        assert rating.review == "Great"
        assert rating.store.id == store.id

    def test_same_submission_twice_is_idempotent(self, db, rating_service, normal_user, store):
        first, _ = rating_service.submit_rating(normal_user.id, store.id, 4, "Nice")
        second, _ = rating_service.submit_rating(normal_user.id, store.id, 4, "Nice")

        assert (first, second) == (True, False)
        assert len(_ratings_for(db, normal_user, store)) == 1

    def test_resubmission_overwrites_value_and_keeps_review(self, db, rating_service, normal_user, store):
        rating_service.submit_rating(normal_user.id, store.id, 5, "Great")

        created, rating = rating_service.submit_rating(normal_user.id, store.id, 3)

        assert created is False
        assert rating.rating == 3
        assert rating.review == "Great"

    def test_empty_review_clears(self, rating_service, normal_user, store):
        rating_service.submit_rating(normal_user.id, store.id, 5, "Great")

        _, rating = rating_service.submit_rating(normal_user.id, store.id, 5, "")

        assert rating.review == ""

    def test_existing_row_takes_update_path(self, db, rating_service, normal_user, store, make_rating):
        """Linha gravada por outra requisição: ON CONFLICT segue para o UPDATE"""
        make_rating(normal_user, store, 1, "meh")

        created, rating = rating_service.submit_rating(normal_user.id, store.id, 2)

        assert created is False
        assert rating.rating == 2
        assert len(_ratings_for(db, normal_user, store)) == 1

    def test_response_messages(self, rating_service, normal_user, store):
        first = rating_service.submit_rating_response(normal_user.id, store.id, 5, "Great")
        second = rating_service.submit_rating_response(normal_user.id, store.id, 3, None)

        assert first["message"] == "Rating submitted successfully"
        assert second["message"] == "Rating updated successfully"
        assert second["data"].store.average_rating == 3.0
        assert second["data"].store.total_ratings == 1

    def test_missing_store(self, rating_service, normal_user):
        with pytest.raises(NotFoundError):
            rating_service.submit_rating(normal_user.id, 9999, 5)

    def test_inactive_store_same_error(self, rating_service, normal_user, make_user, make_store):
        closed = make_store(make_user(role=UserRole.STORE_OWNER), is_active=False)

        with pytest.raises(NotFoundError) as exc:
            rating_service.submit_rating(normal_user.id, closed.id, 5)

        assert exc.value.message == "Store not found or is not active"

    @pytest.mark.parametrize("value", [0, 6, -1, True, 4.5, "5", None])
    def test_invalid_rating_value(self, db, rating_service, normal_user, store, value):
        with pytest.raises(ValidationError) as exc:
            rating_service.submit_rating(normal_user.id, store.id, value)

        assert exc.value.errors[0]["field"] == "rating"
        assert _ratings_for(db, normal_user, store) == []

    def test_review_too_long(self, rating_service, normal_user, store):
        with pytest.raises(ValidationError) as exc:
            rating_service.submit_rating(normal_user.id, store.id, 4, "x" * 501)

        assert exc.value.errors[0]["field"] == "review"

    def test_concurrent_submissions_keep_one_row(self, tmp_path, password_hash):
        """Envios simultâneos do mesmo par: uma criação, o resto atualizações"""
        engine = create_engine(
            f"sqlite:///{tmp_path / 'ratings.db'}",
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        event.listen(engine, "connect", lambda conn, _: conn.execute("PRAGMA foreign_keys=ON"))
        models.Base.metadata.create_all(engine)
        Session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

        with Session() as setup:
            owner = models.User(name="Owner", email="o@example.com", hashed_password=password_hash,
                                address="x", role=UserRole.STORE_OWNER)
            rater = models.User(name="Rater", email="r@example.com", hashed_password=password_hash,
                                address="x", role=UserRole.USER)
            setup.add_all([owner, rater])
            setup.flush()
            shop = models.Store(name="Busy Shop", email="busy@example.com", address="x", owner_id=owner.id)
            setup.add(shop)
            setup.commit()
            user_id, store_id = rater.id, shop.id

        workers = 4
        barrier = threading.Barrier(workers)
        results, errors = [], []

        def submit(value):
            with Session() as session:
                barrier.wait()
                try:
                    created, _ = RatingService(session).submit_rating(user_id, store_id, value)
                    results.append(created)
                except Exception as e:  # noqa: BLE001 - o teste reporta qualquer falha
                    errors.append(e)

        threads = [threading.Thread(target=submit, args=(v,)) for v in range(1, workers + 1)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        with Session() as check:
            count = check.query(models.Rating).filter_by(user_id=user_id, store_id=store_id).count()
        engine.dispose()

        assert errors == []
        assert sorted(results) == [False] * (workers - 1) + [True]
        assert count == 1


# ═══════════════════════════════════════════════════════════
# REMOÇÃO
# ═══════════════════════════════════════════════════════════

class TestDeleteOwnRating:

    def test_deletes_own(self, db, rating_service, normal_user, store, make_rating):
        rating = make_rating(normal_user, store, 4)

        rating_service.delete_own_rating(normal_user.id, rating.id)

        assert _ratings_for(db, normal_user, store) == []

    def test_other_users_rating_is_not_found_and_kept(
            self, db, rating_service, normal_user, make_user, store, make_rating):
        someone_else = make_user()
        rating = make_rating(someone_else, store, 2)

        with pytest.raises(NotFoundError) as exc:
            rating_service.delete_own_rating(normal_user.id, rating.id)

        assert exc.value.message == "Rating not found"
        assert len(_ratings_for(db, someone_else, store)) == 1

    def test_missing_id_same_error(self, rating_service, normal_user):
        with pytest.raises(NotFoundError) as exc:
            rating_service.delete_own_rating(normal_user.id, 424242)

        assert exc.value.message == "Rating not found"
