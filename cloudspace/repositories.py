"""Data access for users, workspaces, memberships and files.

These classes only query and stage changes on the session. Authorization,
error handling and commits belong to the services.
"""

from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from cloudspace.models.file import File
from cloudspace.models.user import User
from cloudspace.models.workspace import UserWorkspace, Workspace
from cloudspace.utils.pagination import Page, PageRequest, paginate


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: UUID) -> User | None:
        return self.db.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def add(self, user: User) -> User:
        self.db.add(user)
        return user


class WorkspaceRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, workspace_id: UUID) -> Workspace | None:
        return self.db.get(Workspace, workspace_id)

    def find_owned_by_name(
        self,
        owner_id: UUID,
        name: str,
        exclude_id: UUID | None = None,
    ) -> Workspace | None:
        """Find a workspace the user owns with the given name."""
        query = self.db.query(Workspace).filter(
            Workspace.owner_id == owner_id, Workspace.name == name
        )
        if exclude_id is not None:
            query = query.filter(Workspace.id != exclude_id)
        return query.first()

    def _member_query(self, user_id: UUID):
        return (
            self.db.query(Workspace)
            .join(UserWorkspace, UserWorkspace.workspace_id == Workspace.id)
            .filter(UserWorkspace.user_id == user_id)
            .order_by(UserWorkspace.id)
        )

    def page_for_member(self, user_id: UUID, page_request: PageRequest) -> Page[Workspace]:
        """Workspaces the user is a member of, in the order they were linked."""
        return paginate(self._member_query(user_id), page_request)

    def list_for_member(self, user_id: UUID) -> list[Workspace]:
        return self._member_query(user_id).all()

    def add(self, workspace: Workspace) -> Workspace:
        self.db.add(workspace)
        return workspace

    def delete(self, workspace: Workspace) -> None:
        self.db.delete(workspace)


class MembershipRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: UUID, workspace_id: UUID) -> UserWorkspace | None:
        """Membership for a (user, workspace) pair, with both sides loaded."""
        return (
            self.db.query(UserWorkspace)
            .options(
                joinedload(UserWorkspace.user),
                joinedload(UserWorkspace.workspace).joinedload(Workspace.owner),
            )
            .filter(UserWorkspace.user_id == user_id, UserWorkspace.workspace_id == workspace_id)
            .first()
        )

    def add(self, membership: UserWorkspace) -> UserWorkspace:
        self.db.add(membership)
        return membership

    def delete_by_workspace_id(self, workspace_id: UUID) -> int:
        return (
            self.db.query(UserWorkspace)
            .filter(UserWorkspace.workspace_id == workspace_id)
            .delete(synchronize_session="fetch")
        )

    def delete_by_user_and_workspace(self, user_id: UUID, workspace_id: UUID) -> int:
        return (
            self.db.query(UserWorkspace)
            .filter(UserWorkspace.user_id == user_id, UserWorkspace.workspace_id == workspace_id)
            .delete(synchronize_session="fetch")
        )


class FileRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, file_id: UUID) -> File | None:
        return self.db.get(File, file_id)

    def find_by_name(self, workspace_id: UUID, file_name: str, file_extension: str) -> File | None:
        return (
            self.db.query(File)
            .filter(
                File.workspace_id == workspace_id,
                File.file_name == file_name,
                File.file_extension == file_extension,
            )
            .first()
        )

    def page_for_workspace(self, workspace_id: UUID, page_request: PageRequest) -> Page[File]:
        query = (
            self.db.query(File)
            .filter(File.workspace_id == workspace_id)
            .order_by(File.created_at, File.id)
        )
        return paginate(query, page_request)

    def paths_for_workspace(self, workspace_id: UUID) -> list[str]:
        rows = self.db.query(File.path).filter(File.workspace_id == workspace_id).all()
        return [path for (path,) in rows]

    def add(self, file: File) -> File:
        self.db.add(file)
        return file

    def delete(self, file: File) -> None:
        self.db.delete(file)

    def delete_by_workspace_id(self, workspace_id: UUID) -> int:
        return (
            self.db.query(File)
            .filter(File.workspace_id == workspace_id)
            .delete(synchronize_session="fetch")
        )
