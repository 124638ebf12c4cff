from dataclasses import dataclass, field
from typing import List

import pytest

from simplecontent_app.core.configuration import ConfigurationBuilder
from simplecontent_app.core.error_handlers import ConfigurationError
from simplecontent_app.core.options import OptionsMonitor, bind, bind_list
from simplecontent_app.models import NavigationNode, ProjectSettings, SimpleAuthSettings, SimpleAuthUser


def build(data):
    return ConfigurationBuilder().add_in_memory(data).build()


def test_bind_matches_pascal_case_keys_to_snake_case_fields():
    config = build({
        'SimpleAuthSettings:AuthenticationScheme': 'cookies',
        'SimpleAuthSettings:EnablePasswordHasherUi': 'true',
    })

    settings = bind(config.get_section('SimpleAuthSettings'), SimpleAuthSettings)

    assert settings.authentication_scheme == 'cookies'
    assert settings.enable_password_hasher_ui is True
    assert settings.role_claim_type == 'Role'


def test_bind_list_with_nested_claims():
    config = build({
        'Users:0:UserName': 'admin',
        'Users:0:Claims:0:ClaimType': 'Role',
        'Users:0:Claims:0:ClaimValue': 'Administrators',
        'Users:1:UserName': 'guest',
    })

    users = bind_list(config.get_section('Users'), SimpleAuthUser)

    assert [user.user_name for user in users] == ['admin', 'guest']
    assert users[0].claim_values('role') == ['Administrators']
    assert users[1].claims == []


def test_bind_converts_integers_and_rejects_bad_values():
    config = build({'P:ChannelTimeToLive': '15', 'Q:ChannelTimeToLive': 'soon'})

    assert bind(config.get_section('P'), ProjectSettings).channel_time_to_live == 15
    with pytest.raises(ConfigurationError):
        bind(config.get_section('Q'), ProjectSettings)


def test_bind_recursive_dataclass_children():
    config = build({
        'Node:Key': 'root',
        'Node:Children:0:Key': 'child',
        'Node:Children:0:ViewRoles': 'Administrators;Editors',
    })

    node = bind(config.get_section('Node'), NavigationNode)

    assert node.children[0].key == 'child'
    assert node.children[0].role_list() == ['Administrators', 'Editors']
    assert node.is_public() is True
    assert node.children[0].is_public() is False


@dataclass
class Extensions:
    allowed: List[str] = field(default_factory=list)


def test_scalar_list_accepts_pipe_separated_value():
    config = build({'Ext:Allowed': '.png|.jpg'})

    assert bind(config.get_section('Ext'), Extensions).allowed == ['.png', '.jpg']


def test_options_monitor_rebinds_after_reload(tmp_path):
    (tmp_path / 's.json').write_text('{"S": {"AuthenticationScheme": "one"}}', encoding='utf-8')
    config = ConfigurationBuilder(str(tmp_path)).add_json_file('s.json').build()
    monitor = OptionsMonitor.for_type(config, 'S', SimpleAuthSettings)

    first = monitor.current_value
    assert monitor.current_value is first

    (tmp_path / 's.json').write_text('{"S": {"AuthenticationScheme": "two"}}', encoding='utf-8')
    config.reload()

    assert monitor.current_value.authentication_scheme == 'two'
