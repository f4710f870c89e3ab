"""
Request and response shapes of the Tenderly simulation API.

The response models only require the fields the checks read; everything else is
optional and unknown fields are kept, because Tenderly adds fields over time and
the shape differs between call-trace depths.
"""

from typing import Any, Dict, Iterator, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.formatter_utils import to_normalized_address

NetworkId = Literal["1", "3", "4", "5", "42", "42161", "42170"]


class TenderlyModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


# --- Request ---


class StateObject(TenderlyModel):
    balance: Optional[str] = None
    code: Optional[str] = None
    storage: Optional[Dict[str, str]] = None


class ContractCompiler(TenderlyModel):
    name: Literal["solc"] = "solc"
    version: str


class ContractNetwork(TenderlyModel):
    events: Optional[Dict[str, str]] = None
    links: Optional[Dict[str, str]] = None
    address: str
    transaction_hash: Optional[str] = Field(None, alias="transactionHash")


class ContractObject(TenderlyModel):
    contract_name: str = Field(alias="contractName")
    source: str
    source_path: str = Field(alias="sourcePath")
    compiler: ContractCompiler
    networks: Dict[str, ContractNetwork]


class BlockHeader(TenderlyModel):
    number: Optional[str] = None
    timestamp: Optional[str] = None


class TenderlyPayload(TenderlyModel):
    network_id: NetworkId
    block_number: Optional[int] = None
    transaction_index: Optional[int] = None
    from_: str = Field(alias="from")
    to: str
    input: str
    gas: int
    gas_price: Optional[str] = None
    value: Optional[str] = None
    simulation_type: Optional[Literal["full", "quick"]] = None
    save: Optional[bool] = None
    save_if_fails: Optional[bool] = None
    state_objects: Optional[Dict[str, StateObject]] = None
    contracts: Optional[List[ContractObject]] = None
    block_header: Optional[BlockHeader] = None
    generate_access_list: Optional[bool] = None

    def to_request(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class StorageEncodingRequest(TenderlyModel):
    """
    Body of the encode-states endpoint: storage written as Solidity expressions,
    e.g. ``{"0xGovernor": {"value": {"proposals[12].eta": "1700000000"}}}``.
    """

    network_id: str = Field(alias="networkID")
    state_overrides: Dict[str, Dict[str, Dict[str, str]]] = Field(alias="stateOverrides")

    def to_request(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class EncodedStorage(TenderlyModel):
    # slot (32 byte hex) -> value (32 byte hex)
    value: Dict[str, str] = Field(default_factory=dict)


class StorageEncodingResponse(TenderlyModel):
    # Keys are contract addresses, all lower case
    state_overrides: Dict[str, EncodedStorage] = Field(alias="stateOverrides")

    def storage_for(self, address: str) -> Dict[str, str]:
        encoded = self.state_overrides.get(address.lower())
        if encoded is None:
            raise KeyError(f"No encoded storage returned for {address}")
        return encoded.value


# --- Response ---


class SoltypeElement(TenderlyModel):
    name: str = ""
    type: str = ""
    storage_location: Optional[str] = None
    components: Optional[List["SoltypeElement"]] = None
    offset: Optional[int] = None
    index: Optional[str] = None
    indexed: Optional[bool] = None
    simple_type: Optional[Dict[str, Any]] = None


class Input(TenderlyModel):
    soltype: Optional[SoltypeElement] = None
    value: Any = None


class LogRaw(TenderlyModel):
    address: str
    topics: List[str] = Field(default_factory=list)
    data: str = "0x"


class Log(TenderlyModel):
    name: Optional[str] = None
    anonymous: bool = False
    inputs: Optional[List[Input]] = None
    raw: LogRaw


class RawElement(TenderlyModel):
    address: str
    key: str
    original: str
    dirty: str


class StateDiff(TenderlyModel):
    address: Optional[str] = None
    soltype: Optional[SoltypeElement] = None
    original: Any = None
    dirty: Any = None
    raw: Optional[List[RawElement]] = None

    @property
    def contract_address(self) -> Optional[str]:
        if self.address:
            return self.address
        if self.raw:
            return self.raw[0].address
        return None


class Caller(TenderlyModel):
    address: str
    balance: Optional[str] = None


class CallTrace(TenderlyModel):
    hash: Optional[str] = None
    contract_name: Optional[str] = None
    function_name: Optional[str] = None
    function_pc: Optional[int] = None
    function_op: Optional[str] = None
    call_type: Optional[str] = None
    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None
    value: Optional[str] = None
    caller: Optional[Caller] = None
    gas: Optional[int] = None
    gas_used: Optional[int] = None
    input: Optional[str] = None
    decoded_input: Optional[List[Input]] = None
    output: Optional[str] = None
    decoded_output: Optional[List[Input]] = None
    error: Optional[str] = None
    error_reason: Optional[str] = None
    network_id: Optional[str] = None
    calls: Optional[List["CallTrace"]] = None

    def walk(self) -> Iterator["CallTrace"]:
        """Depth-first iteration over this call and all nested calls."""
        yield self
        for call in self.calls or []:
            yield from call.walk()


class StackTrace(TenderlyModel):
    file_index: Optional[int] = None
    contract: Optional[str] = None
    name: Optional[str] = None
    line: Optional[int] = None
    error: Optional[str] = None
    error_reason: Optional[str] = None
    code: Optional[str] = None
    op: Optional[str] = None
    length: Optional[int] = None


class TransactionInfo(TenderlyModel):
    contract_id: Optional[str] = None
    block_number: Optional[int] = None
    transaction_id: Optional[str] = None
    contract_address: Optional[str] = None
    method: Optional[str] = None
    intrinsic_gas: Optional[int] = None
    refund_gas: Optional[int] = None
    call_trace: Optional[CallTrace] = None
    stack_trace: Optional[List[StackTrace]] = None
    logs: Optional[List[Log]] = None
    state_diff: Optional[List[StateDiff]] = None
    created_at: Optional[str] = None


class Transaction(TenderlyModel):
    hash: Optional[str] = None
    block_hash: Optional[str] = None
    block_number: Optional[int] = None
    from_: Optional[str] = Field(None, alias="from")
    gas: Optional[int] = None
    gas_price: Optional[int] = None
    gas_used: Optional[int] = None
    input: Optional[str] = None
    nonce: Optional[int] = None
    to: Optional[str] = None
    index: Optional[int] = None
    value: Optional[str] = None
    status: bool = False
    addresses: List[str] = Field(default_factory=list)
    contract_ids: Optional[List[str]] = None
    network_id: Optional[str] = None
    function_selector: Optional[str] = None
    transaction_info: TransactionInfo = Field(default_factory=TransactionInfo)
    timestamp: Optional[str] = None
    method: Optional[str] = None
    error_message: Optional[str] = None

    @field_validator("addresses", mode="after")
    @classmethod
    def _checksum_addresses(cls, addresses: List[str]) -> List[str]:
        return [to_normalized_address(address) for address in addresses]


class Simulation(TenderlyModel):
    id: str
    project_id: Optional[str] = None
    owner_id: Optional[str] = None
    network_id: Optional[str] = None
    block_number: Optional[int] = None
    transaction_index: Optional[int] = None
    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None
    input: Optional[str] = None
    gas: Optional[int] = None
    gas_price: Optional[str] = None
    value: Optional[str] = None
    method: Optional[str] = None
    status: bool = False
    queue_origin: Optional[str] = None
    created_at: Optional[str] = None


class TokenData(TenderlyModel):
    symbol: Optional[str] = None
    name: Optional[str] = None
    decimals: Optional[int] = None


class ContractInfo(TenderlyModel):
    id: Optional[int] = None
    path: Optional[str] = None
    name: Optional[str] = None
    source: Optional[str] = None


class ContractData(TenderlyModel):
    main_contract: Optional[int] = None
    contract_info: Optional[List[ContractInfo]] = None
    abi: Optional[List[Dict[str, Any]]] = None


class TenderlyContract(TenderlyModel):
    id: Optional[str] = None
    contract_id: Optional[str] = None
    balance: Optional[str] = None
    network_id: Optional[str] = None
    public: Optional[bool] = None
    verified_by: Optional[str] = None
    verification_date: Optional[str] = None
    address: str
    contract_name: Optional[str] = None
    ens_domain: Optional[str] = None
    type: Optional[str] = None
    evm_version: Optional[str] = None
    compiler_version: Optional[str] = None
    optimizations_used: Optional[bool] = None
    optimization_runs: Optional[int] = None
    data: Optional[ContractData] = None
    creation_block: Optional[int] = None
    creation_tx: Optional[str] = None
    creator_address: Optional[str] = None
    created_at: Optional[str] = None
    language: Optional[str] = None
    in_project: Optional[bool] = None
    number_of_files: Optional[int] = None
    standard: Optional[str] = None
    standards: Optional[List[str]] = None
    token_data: Optional[TokenData] = None

    @field_validator("address", mode="after")
    @classmethod
    def _checksum_address(cls, address: str) -> str:
        return to_normalized_address(address)


class GeneratedAccessList(TenderlyModel):
    address: str
    storage_keys: List[str] = Field(default_factory=list)


class TenderlySimulation(TenderlyModel):
    transaction: Transaction
    simulation: Simulation
    contracts: List[TenderlyContract] = Field(default_factory=list)
    generated_access_list: Optional[List[GeneratedAccessList]] = None

    def contract_at(self, address: str) -> Optional[TenderlyContract]:
        address = to_normalized_address(address)
        return next((contract for contract in self.contracts if contract.address == address), None)

    @property
    def revert_reason(self) -> Optional[str]:
        if self.transaction.error_message:
            return self.transaction.error_message
        for frame in self.transaction.transaction_info.stack_trace or []:
            if frame.error_reason or frame.error:
                return frame.error_reason or frame.error
        call_trace = self.transaction.transaction_info.call_trace
        if call_trace is not None:
            return call_trace.error_reason or call_trace.error
        return None
