from __future__ import annotations

from pathlib import Path

import pytest

from ramlify.loader import load_raml
from ramlify.model import ApiModel

SAMPLE_RAML = """\
#%RAML 1.0
title: Example API
version: v1
baseUri: https://api.example.com/{version}
mediaType: application/json
types:
  Resource:
    properties:
      id: string
  User:
    type: Resource
    properties:
      name: string
      email?: string
      age?: integer
  UserList:
    type: User[]
traits:
  paged:
    queryParameters:
      page?: integer
/users:
  get:
    displayName: listUsers
    is: [paged]
    responses:
      200:
        body:
          application/json:
            type: User[]
  post:
    body:
      application/json:
        type: User
    responses:
      201:
        body:
          application/json:
            type: User
  /{userId}:
    uriParameters:
      userId: string
    get:
      responses:
        200:
          body:
            application/json:
              type: User
    delete:
      responses:
        204:
"""


@pytest.fixture()
def sample_raml(tmp_path: Path) -> Path:
    path = tmp_path / "api.raml"
    path.write_text(SAMPLE_RAML, encoding="utf-8")
    return path


@pytest.fixture()
def sample_api(sample_raml: Path) -> ApiModel:
    return load_raml(sample_raml)
