"""System under test descriptor.

The descriptor is opaque to the engine: it is carried by a test set and
rendered in reports, but never interpreted.
"""

from pydantic import AliasChoices, Field

from pytest_atf.models import DescribedMixin


class SystemUnderTest(DescribedMixin):
    """Description of the system a test set runs against."""

    systype: str = Field(
        default='',
        alias='Systype',
        validation_alias=AliasChoices('Systype', 'systype', 'Type'),
        title='Type',
        description='Kind of system under test.',
    )

    version: str = Field(
        default='',
        title='Version',
        description='Version of the system under test.',
    )

    ipaddr: str = Field(
        default='',
        alias='IPaddr',
        validation_alias=AliasChoices('IPaddr', 'ipaddr', 'IPAddress'),
        title='IP address',
        description='Network address of the system under test.',
        examples=[
            '192.0.2.10',
        ],
    )
