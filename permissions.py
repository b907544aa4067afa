from pydantic import BaseModel
from typing import Dict, List

from config import Secrets
from device import ActionRequest


class Grant(BaseModel):
    plug_on: List[str] = []
    daughter_signal: List[str] = []
    all_off: bool = False


def load_permissions(secrets: Secrets) -> Dict[str, Grant]:
    """Map each configured bearer token to what it may do.

    Unset tokens are left out, so an empty bearer value never matches.
    """
    table = {
        secrets.token_nathan: Grant(plug_on=["girlfriend_outlet"]),
        secrets.token_girlfriend: Grant(plug_on=["nathan_outlet"]),
        secrets.token_daughter: Grant(plug_on=["grandparents_outlet"]),
        secrets.token_mom: Grant(daughter_signal=["red"]),
        secrets.token_dad: Grant(daughter_signal=["blue"]),
        secrets.token_admin: Grant(all_off=True),
    }
    return {token: grant for token, grant in table.items() if token}


def authorize(grant: Grant, request: ActionRequest) -> bool:
    if request.action == "plug_on":
        return request.target in grant.plug_on
    if request.action == "daughter_signal":
        return request.color in grant.daughter_signal
    if request.action == "all_off":
        return grant.all_off
    return False
