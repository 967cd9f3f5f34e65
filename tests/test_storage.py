from habit_tracker.authentication import check_password


def test_seeded_demo_user__exists_with_hashed_password(app, storage, user):
    assert user is not None
    assert user.username == app.config["DEMO_USERNAME"]
    assert user.password != app.config["DEMO_PASSWORD"]
    assert check_password(app.config["DEMO_PASSWORD"], user.password)
    assert "password" not in user.to_dict()


def test_create_user__assigns_increasing_ids(storage, user):
    other = storage.create_user({"username": "u2", "password": "x"})
    assert other.id > user.id
    assert storage.get_user(other.id).username == "u2"
    assert storage.get_user_by_username("nobody") is None
    assert storage.get_user(9999) is None


def test_create_habit__defaults_and_created_at(make_habit, user):
    habit = make_habit()
    assert habit.id is not None
    assert habit.user_id == user.id
    assert habit.frequency == "daily"
    assert habit.days_of_week == [0, 1, 2, 3, 4, 5, 6]
    assert habit.created_at is not None


def test_get_all_habits__filters_by_user_in_insertion_order(storage, make_habit):
    other = storage.create_user({"username": "u2", "password": "x"})
    first = make_habit("A")
    storage.create_habit({"name": "Theirs", "category": "X", "user_id": other.id})
    second = make_habit("B")

    habits = storage.get_all_habits(first.user_id)
    assert [h.id for h in habits] == [first.id, second.id]
    assert [h.name for h in storage.get_all_habits(other.id)] == ["Theirs"]


def test_update_habit__merges_fields_and_keeps_identity(storage, make_habit):
    habit = make_habit(notes="old")
    created_at = habit.created_at
    habit_id = habit.id

    updated = storage.update_habit(habit_id, {"name": "Read more", "id": 42, "created_at": None})
    assert updated.id == habit_id
    assert updated.name == "Read more"
    assert updated.category == "Learning"
    assert updated.notes == "old"
    assert updated.created_at == created_at


def test_update_habit__missing_id_returns_none(storage):
    assert storage.update_habit(9999, {"name": "x"}) is None


def test_delete_habit__cascades_to_completions(storage, make_habit):
    habit = make_habit()
    keep = make_habit("Keep")
    for day in ["2024-01-01", "2024-01-02", "2024-01-03"]:
        storage.track_completion(habit.id, day, True, 100)
    storage.track_completion(keep.id, "2024-01-01", True, 100)
    habit_id = habit.id

    assert storage.delete_habit(habit_id) is True
    assert storage.get_habit(habit_id) is None
    assert storage.get_completions_for_habit(habit_id) == []
    assert len(storage.get_completions_for_habit(keep.id)) == 1


def test_delete_habit__missing_id_returns_false(storage):
    assert storage.delete_habit(9999) is False


def test_habit_ids__are_not_reused_after_delete(storage, make_habit):
    habit = make_habit()
    old_id = habit.id
    storage.delete_habit(old_id)
    assert make_habit("Next").id > old_id


def test_delete_habit__releases_its_lock(storage, make_habit):
    habit = make_habit()
    habit_id = habit.id
    storage.track_completion(habit_id, "2024-01-01", True, 100)
    assert habit_id in storage._habit_locks

    storage.delete_habit(habit_id)
    assert habit_id not in storage._habit_locks


def test_create_habit__created_at_serializes_with_utc_offset(make_habit):
    created = make_habit().to_dict()["createdAt"]
    assert created.endswith("+00:00")
