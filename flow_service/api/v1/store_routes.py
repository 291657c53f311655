"""
Store API Routes
REST API endpoints for the builder's users, workspaces, bots and
submitted form data.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, status

from flow_service.config.constants import BotRole
from flow_service.dependencies import (
    BotRepositoryDep,
    StoreServiceDep,
    SubmissionRepositoryDep,
    UserRepositoryDep,
    WorkspaceRepositoryDep,
)
from flow_service.exceptions import NotFoundError
from flow_service.models.schemas import (
    AddUserToBotRequest,
    AssociateBotRequest,
    CreateCollectionRequest,
    EditFlowDataRequest,
    FetchLiveDataRequest,
    FormDataRequest,
    WorkspaceForUserRequest,
)
from flow_service.utils.serialization import to_json_safe

router = APIRouter(tags=["store"])


# ============================================================================
# USERS
# ============================================================================

@router.post("/usersnew", status_code=status.HTTP_201_CREATED, summary="Create a user as sent")
async def create_user_raw(users: UserRepositoryDep, document: Dict[str, Any]) -> Dict[str, Any]:
    return await users.create(document)


@router.post("/users", status_code=status.HTTP_201_CREATED, summary="Create a user with workspace associations")
async def create_user(users: UserRepositoryDep, document: Dict[str, Any]) -> Dict[str, Any]:
    return await users.create_with_associations(document)


@router.get("/users/{phone}", summary="Get a user by phone number")
async def get_user_by_phone(phone: str, users: UserRepositoryDep) -> Dict[str, Any]:
    return to_json_safe(await users.get_by_phone(phone))


@router.get("/usersbyid/{user_id}", summary="Get a user by id")
async def get_user_by_id(user_id: str, users: UserRepositoryDep) -> Dict[str, Any]:
    return to_json_safe(await users.get_by_id(user_id))


@router.post("/users/associate-bot", summary="Grant a user a role on a bot")
async def associate_bot(request: AssociateBotRequest, users: UserRepositoryDep) -> Dict[str, str]:
    await users.associate_bot(request.user_id, request.workspace_id, request.bot_id, request.role)
    return {"message": "Bot associated successfully"}


# ============================================================================
# WORKSPACES
# ============================================================================

@router.post("/workspaceexuser", status_code=status.HTTP_201_CREATED, summary="Create a workspace for a user")
async def create_workspace_for_user(request: WorkspaceForUserRequest, store: StoreServiceDep) -> Dict[str, Any]:
    return await store.create_workspace_for_user(request.user_id, request.workspace_data)


@router.post("/workspace", status_code=status.HTTP_201_CREATED, summary="Create a workspace")
async def create_workspace(
        workspaces: WorkspaceRepositoryDep,
        document: Dict[str, Any]
) -> Dict[str, Any]:
    return await workspaces.create(document)


@router.get("/workspaces/{workspace_id}", summary="Get a workspace")
async def get_workspace(workspace_id: str, workspaces: WorkspaceRepositoryDep) -> Dict[str, Any]:
    return to_json_safe(await workspaces.get_by_id(workspace_id))


@router.get("/user/{user_id}/workspacesowner", summary="Workspaces where the user owns a bot")
async def get_owner_workspaces(user_id: str, store: StoreServiceDep) -> List[Dict[str, Any]]:
    return to_json_safe(await store.list_workspaces_with_role(user_id, BotRole.OWNER))


@router.get("/user/{user_id}/workspacesuser", summary="Workspaces where the user uses a bot")
async def get_user_workspaces(user_id: str, store: StoreServiceDep) -> List[Dict[str, Any]]:
    return to_json_safe(await store.list_workspaces_with_role(user_id, BotRole.USER))


# ============================================================================
# BOTS
# ============================================================================

@router.post("/bots", status_code=status.HTTP_201_CREATED, summary="Create a bot")
async def create_bot(bots: BotRepositoryDep, document: Dict[str, Any]) -> Dict[str, Any]:
    return await bots.create(document)


@router.get("/bots/{bot_id}", summary="Get a bot")
async def get_bot(bot_id: str, bots: BotRepositoryDep) -> Dict[str, Any]:
    return to_json_safe(await bots.get_by_id(bot_id))


@router.post("/adduserstobot", summary="Add a user to a bot, creating the bot if needed")
async def add_user_to_bot(request: AddUserToBotRequest, bots: BotRepositoryDep) -> Dict[str, Any]:
    outcome = await bots.add_user(request.bot_id, request.user_id, request.name, request.role)
    echo = {
        "botId": request.bot_id,
        "userid": request.user_id,
        "name": request.name,
        "role": request.role,
        "phone": request.phone,
    }
    if outcome == "updated":
        return {"message": "User added to bot successfully", **echo}
    if outcome == "created":
        return {"message": "New bot created with user", **echo}
    raise NotFoundError(
        "Bot not found and unable to create new one",
        resource_type="bot",
        resource_id=request.bot_id
    )


@router.post("/editflowdatainbot", summary="Store a bot's flow definition")
async def edit_flow_data(request: EditFlowDataRequest, bots: BotRepositoryDep) -> Dict[str, Any]:
    result = await bots.update_flow_data(
        request.bot_id,
        screens=request.screens,
        botinfo=request.botinfo,
        user_id=request.user_id,
        flow_id=request.flow_id
    )
    return {"message": "Bot updated successfully", "result": result}


@router.get("/users/{user_id}/workspaces/{workspace_id}/bots", summary="Bots of a user in a workspace")
async def get_workspace_bots(user_id: str, workspace_id: str, store: StoreServiceDep) -> List[Dict[str, Any]]:
    return await store.list_workspace_bots(user_id, workspace_id)


# ============================================================================
# FORM SUBMISSIONS
# ============================================================================

@router.post("/createdb", status_code=status.HTTP_201_CREATED, summary="Create a submission collection")
async def create_collection(request: CreateCollectionRequest, submissions: SubmissionRepositoryDep) -> Dict[str, str]:
    await submissions.create_collection(request.database, request.collection)
    return {"message": "Collection created successfully", "collectionName": request.collection}


@router.post("/formdata", status_code=status.HTTP_201_CREATED, summary="Store a submitted form")
async def store_form_data(request: FormDataRequest, submissions: SubmissionRepositoryDep) -> Dict[str, Any]:
    return await submissions.insert(request.data["datafilledby"], request.collection, request.data)


@router.post("/fetchlivedata", summary="Submissions within a time range")
async def fetch_live_data(request: FetchLiveDataRequest, submissions: SubmissionRepositoryDep) -> List[Dict[str, Any]]:
    results = await submissions.find_in_range(
        request.database,
        request.collection,
        request.start_date,
        request.end_date
    )
    return to_json_safe(results)
