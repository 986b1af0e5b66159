"""
Menu layer

MessengerApp drives one interactive session. It connects the console view
with the account, contact, chat and message services.

Every action runs inside ``_guard``: a failure is reported, the session is
rolled back where needed and control returns to the menu that started it.
"""

import logging
from typing import Awaitable, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from messenger.cli.view import SEPARATOR, ConsoleView, MenuEntries
from messenger.exceptions import InvalidActionError, MessengerError
from messenger.models.schemas.chats import ChatSummary
from messenger.models.schemas.messages import MessageResponse
from messenger.models.schemas.users import ListEntry
from messenger.services.account_service import AccountService
from messenger.services.chat_service import ChatService
from messenger.services.contact_service import ContactService
from messenger.services.message_service import MessageService

logger = logging.getLogger(__name__)

Action = Callable[[], Awaitable[None]]

START_MENU = [(1, "Create user"), (2, "Log in"), (0, "< EXIT")]
USER_MENU = [(1, "Messages"), (2, "Chats"), (3, "Users")]
USER_MENU_FOOTER = [(9, "Delete your account"), (0, "Log out")]
MESSAGES_MENU = [
    (1, "Write a new message"),
    (2, "Edit message"),
    (3, "Delete message"),
]
CHATS_MENU = [
    (1, "Browse your chat list"),
    (2, "Browse chat messages"),
    (3, "Browse the chat members"),
    (4, "Create a group chat"),
    (5, "Create a private chat"),
    (6, "Add members to chat"),
    (7, "Delete members from chat"),
    (8, "Delete chat"),
]
USERS_MENU = [
    (1, "Browse your contact list"),
    (2, "Browse your block list"),
    (3, "Add user to your contact list"),
    (4, "Add user to your block list"),
    (5, "Delete user from your contact list"),
    (6, "Delete user from your block list"),
    (7, "Update your status message"),
]
CHAT_TYPE_MENU = [(1, "group"), (2, "private")]
BACK = [(0, "Back")]

CHAT_TYPES = {1: "group", 2: "private"}
GROUP_PREVIEW_MEMBERS = 3
MESSAGE_PREVIEW_WIDTH = 18


class MessengerApp:
    """Interactive session for one logged-in user at a time."""

    def __init__(
        self, db: AsyncSession, view: ConsoleView, page_size: int = 10
    ) -> None:
        self.db = db
        self.view = view
        self.page_size = page_size
        self.accounts = AccountService(db)
        self.contacts = ContactService(db)
        self.chats = ChatService(db)
        self.messages = MessageService(db)
        self.current_user: Optional[str] = None

    async def run(self) -> None:
        """Start menu loop; returns when the user picks EXIT."""
        while True:
            self.view.render_menu("MAIN MENU", START_MENU)
            choice = self.view.read_choice()

            if choice == 1:
                await self._guard(self.create_user)
            elif choice == 2:
                await self._guard(self.log_in)
            elif choice == 0:
                break
            else:
                self.view.show("Unrecognized choice!")

            if self.current_user is not None:
                await self.user_menu()

    async def user_menu(self) -> None:
        while self.current_user is not None:
            self.view.render_menu("MAIN MENU", USER_MENU, USER_MENU_FOOTER)
            choice = self.view.read_choice()

            if choice == 1:
                await self.messages_menu()
            elif choice == 2:
                await self.chats_menu()
            elif choice == 3:
                await self.users_menu()
            elif choice == 9:
                await self._guard(self.delete_account)
            elif choice == 0:
                self.current_user = None
            else:
                self.view.show("Unrecognized choice!")

    async def messages_menu(self) -> None:
        actions = {
            1: self.write_message,
            2: self.edit_message,
            3: self.delete_message,
        }
        await self._submenu("Messages Menu", MESSAGES_MENU, actions)

    async def chats_menu(self) -> None:
        actions = {
            1: self.list_chats,
            2: self.browse_chat_messages,
            3: self.browse_chat_members,
            4: self.create_group_chat,
            5: self.create_private_chat,
            6: self.add_chat_members,
            7: self.delete_chat_members,
            8: self.delete_chat,
        }
        await self._submenu("Chats Menu", CHATS_MENU, actions)

    async def users_menu(self) -> None:
        actions = {
            1: self.list_contacts,
            2: self.list_blocks,
            3: self.add_contact,
            4: self.add_block,
            5: self.remove_contact,
            6: self.remove_block,
            7: self.update_status,
        }
        await self._submenu("User Menu", USERS_MENU, actions)

    # Accounts

    async def create_user(self) -> None:
        login = self.view.prompt("\tEnter user login: ")
        password = self.view.prompt_secret("\tEnter user password: ")
        phone = self.view.prompt("\tEnter user phone: ")

        await self.accounts.create_user(login, password, phone)
        self.view.show("User successfully created!")

    async def log_in(self) -> None:
        login = self.view.prompt("\tEnter user login: ").strip()
        password = self.view.prompt_secret("\tEnter user password: ")

        self.current_user = await self.accounts.log_in(login, password)
        if self.current_user is None:
            self.view.show("Wrong login or password!")

    async def delete_account(self) -> None:
        login = self._user()
        while True:
            answer = self.view.ask_yes_no(
                "Are you sure you want to delete your account?(y/n)"
            )
            if answer is False:
                return
            if answer:
                break
            self.view.show("Invalid option! Please choose again:(y/n)")

        await self.accounts.delete_account(login)
        self.current_user = None
        self.view.show("You have deleted your own account!")

    # Messages

    async def write_message(self) -> None:
        while True:
            chat_id = await self._pick_chat(
                "What type of chats do you want to send msg to?"
            )
            if chat_id is None:
                return

            text = self.view.prompt("Input your msg: ")
            await self.messages.send_message(self._user(), chat_id, text)
            self.view.show("Your message has been sent!")

    async def edit_message(self) -> None:
        while True:
            msg_id = await self._pick_own_message()
            if msg_id is None:
                return
            if msg_id == 0:
                continue

            text = self.view.prompt("Input your new msg: ")
            await self.messages.edit_message(self._user(), msg_id, text)
            self.view.show("The message has been edited!")

    async def delete_message(self) -> None:
        while True:
            msg_id = await self._pick_own_message()
            if msg_id is None:
                return
            if msg_id == 0:
                continue

            await self.messages.delete_message(self._user(), msg_id)
            self.view.show("The message has been deleted!")

    # Chats

    async def list_chats(self) -> None:
        login = self._user()
        private = await self.chats.chat_summaries(login, "private")
        group = await self.chats.chat_summaries(login, "group")

        self.view.show("No. chat_id\tMembers")
        self.view.show("--------------------")
        self.view.show("Private chat")
        for i, chat in enumerate(private, 1):
            self.view.show(f"{i}. {chat.chat_id}\t{','.join(chat.members)}")
        self.view.show("--------------------")
        self.view.show("Group chat")
        for i, chat in enumerate(group, 1):
            shown = "\t".join(chat.members[:GROUP_PREVIEW_MEMBERS])
            more = "..." if len(chat.members) > GROUP_PREVIEW_MEMBERS else ""
            self.view.show(f"{i}. {chat.chat_id}\t\t{shown}{more}")
        self.view.show(".......................")

    async def browse_chat_messages(self) -> None:
        self.view.show("Please input the chat(id) that you want to enter in:")
        chat_id = self.view.read_choice()
        messages = await self.messages.chat_messages(self._user(), chat_id)

        if not messages:
            self.view.show("There are no messages in this chat yet.")
            return

        for start in range(0, len(messages), self.page_size):
            for message in messages[start : start + self.page_size]:
                self.view.show(
                    f"ID:{message.msg_id} Time:{message.msg_timestamp} "
                    f"Sender:{message.sender_login}\n{message.msg_text}\n"
                )
            if start + self.page_size >= len(messages):
                break

            answer = self.view.ask_yes_no(
                f"Next {self.page_size} messages? (y/n):"
            )
            if answer is False:
                return
            if answer is None:
                self.view.show("Unrecognized choice")
                return

        self.view.show("This is all messages in the chat")

    async def browse_chat_members(self) -> None:
        self.view.show("Please input the chat_id:")
        chat_id = self.view.read_choice()
        members = await self.chats.chat_members(self._user(), chat_id)

        self.view.show("No.\t Members")
        for i, member in enumerate(members, 1):
            self.view.show(f"{i}. {member}")

    async def create_group_chat(self) -> None:
        chat = await self.chats.create_group_chat(self._user())
        self.view.show(f"You have created the chat, chat_id is {chat.chat_id}")
        await self._add_members_loop(chat.chat_id)

    async def create_private_chat(self) -> None:
        contacts = await self.contacts.list_contacts(self._user())
        if not contacts:
            self.view.show("Your contact list is empty.")
            return

        self.view.show("-------------------------")
        self.view.show("No.\tContacts")
        self.view.show(SEPARATOR)
        for i, contact in enumerate(contacts, 1):
            self.view.show(f"{i}. {contact.login}")
        self.view.show(SEPARATOR)
        self.view.show("0. Back")

        choice = self.view.read_choice(
            "Select the contact you would like to chat with(0 for quit):"
        )
        if choice == 0:
            return
        if not 1 <= choice <= len(contacts):
            self.view.show("Unrecognized Choice.")
            return

        contact = contacts[choice - 1].login
        chat = await self.chats.create_private_chat(self._user(), contact)
        self.view.show(
            f"You have created a private chat between you and {contact}, "
            f"the chat's id is {chat.chat_id}"
        )

    async def add_chat_members(self) -> None:
        chat_id = self.view.read_choice(
            "Please input the chat(id) you want to add member(s) in :"
        )
        await self._add_members_loop(chat_id)

    async def delete_chat_members(self) -> None:
        login = self._user()
        chat_id = self.view.read_choice(
            "Please input the chat(id) you want to delete member(s) from :"
        )

        while True:
            members = await self.chats.removable_members(login, chat_id)
            self.view.show("Member in this chat")
            self.view.show(SEPARATOR)
            for i, member in enumerate(members, 1):
                self.view.show(f"{i}. {member}")
            self.view.show(SEPARATOR)
            self.view.show("0. back to the previous menu")
            self.view.show("Please choose the member you want to remove from the chat:")

            choice = self.view.read_choice()
            if choice == 0:
                return
            if not 1 <= choice <= len(members):
                self._wrong_serial_number()
                continue

            member = members[choice - 1]
            try:
                await self.chats.remove_member(login, chat_id, member)
            except InvalidActionError as e:
                self.view.show_error(str(e))
                self.view.show(SEPARATOR)
                continue
            self.view.show(f"Action Permitted: You have deleted {member} from this chat")
            self.view.show("-------------------------")

    async def delete_chat(self) -> None:
        login = self._user()
        chat_id = self.view.read_choice("Please input the chat(id) you want to delete: ")
        await self.chats.require_initiator(login, chat_id)

        self.view.show(
            "If you delete the chat, all the message(s) in the chat will be deleted, "
            "and other members in this chat will also be kicked out."
        )
        answer = self.view.ask_yes_no("Are you sure you want delete the chat?(y/n):")
        if answer is False:
            self.view.show("This chat survived:)")
        elif answer is None:
            self.view.show("Fail to delete the chat due to unrecognized choice")
        else:
            await self.chats.delete_chat(login, chat_id)
            self.view.show("Chat has been deleted.")

    # Contact and block lists

    async def list_contacts(self) -> None:
        self._show_user_list(await self.contacts.list_contacts(self._user()))

    async def list_blocks(self) -> None:
        self._show_user_list(await self.contacts.list_blocks(self._user()))

    async def add_contact(self) -> None:
        other = self.view.prompt(
            "\tEnter the user login you want to add to contact list: "
        ).strip()
        if await self.contacts.add_contact(self._user(), other):
            self.view.show(f"{other} is deleted from your block list!")
        self.view.show(f"{other} is added to your contact list!")

    async def add_block(self) -> None:
        other = self.view.prompt(
            "\tEnter the user login you want to add to block list: "
        ).strip()
        if await self.contacts.add_block(self._user(), other):
            self.view.show(f"{other} is deleted from your contact list!")
        self.view.show(f"{other} is added to your block list!")

    async def remove_contact(self) -> None:
        other = self.view.prompt(
            "\tEnter the user login you want to remove from contact_list:"
        )
        await self.contacts.remove_contact(self._user(), other)
        self.view.show("The user has been deleted from your contact list!")

    async def remove_block(self) -> None:
        other = self.view.prompt(
            "\tEnter the user login you want to remove from block_list:"
        )
        await self.contacts.remove_block(self._user(), other)
        self.view.show("The user has been deleted from your block list!")

    async def update_status(self) -> None:
        status = self.view.prompt("\tEnter your new status message: ")
        await self.accounts.update_status(self._user(), status)
        self.view.show("Your status message has been updated!")

    # Helpers

    async def _submenu(
        self,
        title: str,
        entries: MenuEntries,
        actions: Dict[int, Action],
    ) -> None:
        """Loop over a submenu until the user picks 0."""
        while True:
            self.view.render_menu(title, entries, BACK)
            choice = self.view.read_choice()
            if choice == 0:
                return

            action = actions.get(choice)
            if action is None:
                self.view.show("Unrecognized choice!")
                continue
            await self._guard(action)

    async def _guard(self, action: Action) -> None:
        """Run one menu action and report its failure instead of raising."""
        name = getattr(action, "__name__", repr(action))
        try:
            await action()
        except MessengerError as e:
            await self.db.rollback()
            logger.debug("Action %s refused: %s", name, e)
            self.view.show_error(str(e))
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Database error during %s: %s", name, e)

    async def _pick_chat(self, question: str) -> Optional[int]:
        """Let the user choose one of their chats by type; None on Back."""
        while True:
            self.view.render_menu(question, CHAT_TYPE_MENU, BACK, rule=False)
            choice = self.view.read_choice()
            if choice == 0:
                return None
            if choice not in CHAT_TYPES:
                self.view.show("Unrecognized choice!")
                continue

            chats = await self.chats.chat_summaries(self._user(), CHAT_TYPES[choice])
            if not chats:
                self.view.show("No chat exists!")
                continue

            self._show_chat_choices(chats)
            while True:
                number = self.view.read_choice("\tEnter the chat num(0 for quit): ")
                if number == 0 or 1 <= number <= len(chats):
                    break
                self.view.show("Invalid chat_id! Please type again: ")
            if number:
                return chats[number - 1].chat_id

    async def _pick_own_message(self) -> Optional[int]:
        """Pick a chat, then one of the user's own messages in it.

        None when the user backs out of the chat picker, 0 when no message
        was picked in the chosen chat.
        """
        chat_id = await self._pick_chat("What type of chats do you want to Enter in?")
        if chat_id is None:
            return None

        messages = await self.messages.own_messages(self._user(), chat_id)
        if not messages:
            self.view.show("No msg from you!")
            return 0

        self._show_message_choices(messages)
        while True:
            number = self.view.read_choice("\tEnter the msg num(0 for quit): ")
            if number == 0:
                return 0
            if 1 <= number <= len(messages):
                return messages[number - 1].msg_id
            self.view.show("Invalid msg_id! Please type again: ")

    async def _add_members_loop(self, chat_id: int) -> None:
        login = self._user()
        while True:
            candidates = await self.chats.addable_contacts(login, chat_id)
            self.view.show("-------------------------")
            self.view.show("No.\tContact not in the chat")
            self.view.show(SEPARATOR)
            for i, contact in enumerate(candidates, 1):
                self.view.show(f"{i}. {contact}")
            self.view.show(SEPARATOR)
            self.view.show("0. Back")
            self.view.show("Please choose the No. of contact you want to add")

            choice = self.view.read_choice()
            if choice == 0:
                return
            if not 1 <= choice <= len(candidates):
                self._wrong_serial_number()
                continue

            member = candidates[choice - 1]
            await self.chats.add_member(login, chat_id, member)
            self.view.show(
                f"Action Permitted: You have successfully add {member} to chat {chat_id}"
            )

    def _show_chat_choices(self, chats: List[ChatSummary]) -> None:
        for i, chat in enumerate(chats, 1):
            self.view.show(f"{i}. {', '.join(chat.members)}")

    def _show_message_choices(self, messages: List[MessageResponse]) -> None:
        self.view.show("Number\tAuthor\tDate\tText")
        for i, message in enumerate(messages, 1):
            self.view.show(
                f"{i}\t{message.sender_login}\t{message.msg_timestamp.date()}\t"
                f"{message.preview(MESSAGE_PREVIEW_WIDTH)}"
            )

    def _show_user_list(self, entries: List[ListEntry]) -> None:
        self.view.show("No. User\t\tStatus Message\n-------------------------")
        for i, entry in enumerate(entries, 1):
            self.view.show(f"{i}. {entry.login}\t\t{entry.status or ''}")
        self.view.show("-------------------------")

    def _wrong_serial_number(self) -> None:
        self.view.show(
            "Action denied: Wrong input, please input the serial number in the menu"
        )
        self.view.show(SEPARATOR)

    def _user(self) -> str:
        if self.current_user is None:
            raise InvalidActionError("You are not logged in.")
        return self.current_user
