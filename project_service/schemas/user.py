# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class UserSummary(BaseModel):
    """
    Public view of a user.

    Also used to parse the user service's connection list, which sends
    camelCase names.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID = Field(..., description="User ID")
    username: Optional[str] = Field(None, description="Username")
    first_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("first_name", "firstName"),
        description="Given name",
    )
    last_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("last_name", "lastName"),
        description="Family name",
    )
    location: Optional[str] = Field(None, description="Location")
