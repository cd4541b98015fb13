"""
# `app/routers/callables.py` - Callable functions

Direct invocation surface using the Firebase callable envelope:
request `{"data": {...}}`, response `{"result": ...}`.

| Endpoint                                  | Operation |
|-------------------------------------------|-----------|
| `POST /callables/updateEmailVerified`     | profile `emailVerified: true` (merge) |
| `POST /callables/createUserWithRole`      | account + role claim + role record |
| `POST /callables/deleteUserWithRole`      | delete account (role record removed by the auth trigger) |
| `POST /callables/editUserRole`            | role claim + role record update (record must exist) |
| `POST /callables/addUserRoleByEmail`      | look up account by email, role claim + role record (merge) |

Multi-step callables are not atomic: a failure between steps is returned to the caller
as-is and the steps already done stay done.
"""
from fastapi import APIRouter, Depends

from app.core.clients import Clients, get_clients
from app.core.security import require_callable_role
from app.schemas.callable import (
    AddUserRoleByEmailIn,
    CallableRequest,
    CallableResponse,
    CreateUserWithRoleIn,
    EditUserRoleIn,
    UidIn,
    write_result_out,
)
from app.services import roles, users

router = APIRouter(
    prefix="/callables",
    tags=["Callables"],
    dependencies=[Depends(require_callable_role)],
)


@router.post("/updateEmailVerified", response_model=CallableResponse, summary="Mark email verified")
def update_email_verified(body: CallableRequest[UidIn], clients: Clients = Depends(get_clients)):
    result = users.update_email_verified(clients.db, body.data.uid)
    return CallableResponse(result=write_result_out(result))


@router.post("/createUserWithRole", response_model=CallableResponse, summary="Create account with role")
def create_user_with_role(body: CallableRequest[CreateUserWithRoleIn], clients: Clients = Depends(get_clients)):
    data = body.data
    result = roles.create_user_with_role(clients.auth, clients.db, data.email, data.password, data.role)
    return CallableResponse(result=write_result_out(result))


@router.post("/deleteUserWithRole", response_model=CallableResponse, summary="Delete account")
def delete_user_with_role(body: CallableRequest[UidIn], clients: Clients = Depends(get_clients)):
    roles.delete_user_with_role(clients.auth, body.data.uid)
    return CallableResponse(result=None)


@router.post("/editUserRole", response_model=CallableResponse, summary="Change role")
def edit_user_role(body: CallableRequest[EditUserRoleIn], clients: Clients = Depends(get_clients)):
    result = roles.edit_user_role(clients.auth, clients.db, body.data.uid, body.data.role)
    return CallableResponse(result=write_result_out(result))


@router.post("/addUserRoleByEmail", response_model=CallableResponse, summary="Assign role by email")
def add_user_role_by_email(body: CallableRequest[AddUserRoleByEmailIn], clients: Clients = Depends(get_clients)):
    result = roles.add_user_role_by_email(clients.auth, clients.db, body.data.email, body.data.role)
    return CallableResponse(result=write_result_out(result))
