import pytest
import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore


class TestBuildOrderBy:
    @pytest.fixture
    def model(self):
        Base = orm.declarative_base()

        class User(Base):
            __tablename__ = "users"

            id = sa.Column(sa.Integer(), primary_key=True)
            name = sa.Column(sa.String(255), nullable=False)
            nickname = sa.Column(sa.String(255), nullable=True)
            parent_id = sa.Column(sa.Integer(), sa.ForeignKey("users.id"), nullable=True)
            parent = orm.relationship("User", remote_side=[id])

        return User

    @pytest.fixture
    def mapping(self, model):
        from ..core import mapping_from_model

        return mapping_from_model(model, aliased_properties={"nickname": "nick"})

    @pytest.fixture
    def session(self, model):
        engine = sa.create_engine("sqlite:///")
        model.metadata.create_all(engine)
        session = orm.Session(bind=engine)
        session.add_all(
            [
                model(id=1, name="Ann", nickname="a"),
                model(id=2, name="Bob", nickname="z"),
                model(id=3, name="Cid", nickname="a"),
            ]
        )
        session.commit()
        yield session
        session.close()

    def test_it(self, model, mapping, session):
        from ....validation.params import Sorting
        from ..querying import build_order_by

        clauses = build_order_by(model, mapping, Sorting.from_query("-nick,name"))
        assert [u.id for u in session.query(model).order_by(*clauses)] == [2, 1, 3]

        clauses = build_order_by(model, mapping, Sorting.from_query("-id"))
        assert [u.id for u in session.query(model).order_by(*clauses)] == [3, 2, 1]

    def test_internal_name(self, model, mapping, session):
        from ....validation.params import Sorting
        from ..querying import build_order_by

        clauses = build_order_by(model, mapping, Sorting.from_query("nickname,-name"))
        assert [u.id for u in session.query(model).order_by(*clauses)] == [3, 1, 2]

    def test_invalid(self, model, mapping):
        from ....exceptions import QueryError
        from ....validation.params import Sorting
        from ..querying import build_order_by

        with pytest.raises(QueryError) as excinfo:
            build_order_by(model, mapping, Sorting.from_query("name,parent,color"))
        assert [e.field for e in excinfo.value.errors] == ["parent", "color"]
        assert [e.code for e in excinfo.value.errors] == ["invalid_sort", "invalid_sort"]
