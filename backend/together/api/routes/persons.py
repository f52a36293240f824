"""
Person registry routes.
"""
from fastapi import APIRouter, Depends
from together.models.person import PersonKey
from together.models.user import User
from together.schemas.person import PersonResponse, PersonsResponse, PersonUpdate
from together.api.dependencies import get_current_user, get_person_registry
from together.services.person_service import PersonRegistry

router = APIRouter(prefix="/persons", tags=["persons"])


@router.get("", response_model=PersonsResponse)
async def get_persons(
    current_user: User = Depends(get_current_user),
    persons: PersonRegistry = Depends(get_person_registry)
):
    """Get both person slots of the account."""
    slots = persons.get_persons(current_user.id)
    return PersonsResponse(
        person1=PersonResponse.model_validate(slots[PersonKey.PERSON1]),
        person2=PersonResponse.model_validate(slots[PersonKey.PERSON2])
    )


@router.patch("/{person_key}", response_model=PersonResponse)
async def update_person(
    person_key: str,
    person_data: PersonUpdate,
    current_user: User = Depends(get_current_user),
    persons: PersonRegistry = Depends(get_person_registry)
):
    """Rename a person slot and/or change its preferred currency."""
    return persons.update_person(
        current_user.id,
        person_key,
        name=person_data.name,
        currency_preference=person_data.currency_preference
    )
