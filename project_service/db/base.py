# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from sqlalchemy.orm import declarative_base

# Declare base class shared by all models
Base = declarative_base()
