from typing import Any, Optional, TypedDict


class UserPayload(TypedDict, total=False):

    _id: Any
    prenom: str
    nom: str
    email: Optional[str]
    role: Optional[str]
    academieId: Optional[str]
    picture: Optional[str]
    isVerified: bool
