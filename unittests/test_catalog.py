import logging

import pytest
from frozendict import frozendict

from ovex.validation import RuleCatalog, RuleDescriptor, RuleKind
from unittests.models import Address, Customer, IsEven, IsNotTaken


class _PremiumCustomer(Customer):
    pass


class TestRuleCatalog:
    @pytest.mark.parametrize(
        ["groups", "expected_types"],
        [
            pytest.param(None, ["min_length", "max_length", "matches", "is_defined"], id="no filter"),
            pytest.param(set(), ["min_length", "max_length", "matches", "is_defined"], id="empty filter"),
            pytest.param({"create"}, ["min_length", "matches", "is_defined"], id="create"),
            pytest.param({"update"}, ["min_length", "max_length", "is_defined"], id="update"),
            pytest.param({"update", "create"}, ["min_length", "max_length", "matches", "is_defined"], id="both"),
            pytest.param({"delete"}, ["min_length", "is_defined"], id="unknown group"),
        ],
    )
    def test_group_filter(self, groups, expected_types: list[str]):
        catalog = RuleCatalog()
        catalog.register(
            RuleDescriptor(target=Customer, property_name="name", type="min_length", value1=1),
            RuleDescriptor(target=Customer, property_name="name", type="max_length", value1=9, groups={"update"}),
            RuleDescriptor(target=Customer, property_name="email", type="matches", value1="@", groups={"create"}),
            RuleDescriptor(target=Customer, property_name="email", type="is_defined", groups={"admin"}, always=True),
        )
        assert [descriptor.type for descriptor in catalog.rules_for(Customer, groups)] == expected_types

    def test_rules_of_other_types_are_ignored(self):
        catalog = RuleCatalog()
        catalog.register(
            RuleDescriptor(target=Address, property_name="zip_code", type="min_length", value1=5),
            RuleDescriptor(target=Customer, property_name="name", kind=RuleKind.PRESENCE),
        )
        assert [descriptor.target for descriptor in catalog.rules_for(Customer)] == [Customer]
        assert catalog.rules_for(int) == []

    def test_inherited_rules(self):
        own_max_length = RuleDescriptor(target=_PremiumCustomer, property_name="name", type="max_length", value1=50)
        inherited_presence = RuleDescriptor(target=Customer, property_name="name", kind=RuleKind.PRESENCE)
        overridden_max_length = RuleDescriptor(target=Customer, property_name="name", type="max_length", value1=10)
        catalog = RuleCatalog()
        catalog.register(inherited_presence, overridden_max_length, own_max_length)
        assert catalog.rules_for(_PremiumCustomer) == [own_max_length, inherited_presence]
        assert catalog.rules_for(Customer) == [inherited_presence, overridden_max_length]

    def test_group_by_property_name(self):
        name_required = RuleDescriptor(target=Customer, property_name="name", kind=RuleKind.PRESENCE)
        email_pattern = RuleDescriptor(target=Customer, property_name="email", type="matches", value1="@")
        name_length = RuleDescriptor(target=Customer, property_name="name", type="max_length", value1=10)
        grouped = RuleCatalog.group_by_property_name([name_required, email_pattern, name_length])
        assert isinstance(grouped, frozendict)
        assert list(grouped.keys()) == ["name", "email"]
        assert grouped["name"] == (name_required, name_length)
        assert grouped["email"] == (email_pattern,)

    def test_register_constraint(self):
        catalog = RuleCatalog()
        first = catalog.register_constraint(IsEven, name="is_even")
        second = catalog.register_constraint(IsEven)
        async_metadata = catalog.register_constraint(IsNotTaken)
        assert second.name == "is_even"
        assert catalog.custom_implementations_for(IsEven) == [first, second]
        assert catalog.custom_implementations_for("is_even") == [first, second]
        assert catalog.constraint_class("is_even") is IsEven
        assert catalog.constraint_name(IsNotTaken) == "IsNotTaken"
        assert not first.is_async
        assert async_metadata.is_async
        assert catalog.custom_implementations_for(Address) == []

    def test_register_constraint_name_clash(self):
        catalog = RuleCatalog()
        catalog.register_constraint(IsEven, name="check")
        with pytest.raises(ValueError) as error:
            catalog.register_constraint(IsNotTaken, name="check")
        assert str(error.value) == "The constraint name 'check' is already used by IsEven"
        with pytest.raises(ValueError) as error:
            catalog.register_constraint(IsEven, name="other")
        assert str(error.value) == "IsEven is already registered with the name 'check'"

    def test_register_constraint_without_validate(self):
        with pytest.raises(TypeError):
            RuleCatalog().register_constraint(Address, instance=Address("Main St", "12345"))  # type:ignore[arg-type]

    def test_unregistered_constraint_warning(self, caplog):
        caplog.set_level(logging.WARNING, logger="ovex.validation.types")
        catalog = RuleCatalog()
        catalog.register(
            RuleDescriptor(target=Customer, property_name="age", kind=RuleKind.CUSTOM, constraint_class=IsEven)
        )
        assert len(catalog) == 1
        assert "The constraint IsEven of Customer.age is not registered (yet)" in caplog.messages

    def test_unknown_constraint_name(self):
        with pytest.raises(KeyError):
            RuleCatalog().custom_implementations_for("unknown")
